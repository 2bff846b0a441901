# Services package init
"""
zapShift Backend — Services Layer
===================================

What:  Business logic between routes (HTTP) and the document store.
How:   Each resource service is a stateless class with a module-level
       singleton; methods receive the DocumentStore as their first argument.

Service Inventory:
    - UserService, ParcelService, RiderService, PaymentService,
      TrackingService: one store operation per method
    - PaymentIntentService: converts to minor units, calls the gateway
    - IdentityVerifier (abstract) / FirebaseIdentityVerifier
    - PaymentGateway (abstract) / StripePaymentGateway
"""
