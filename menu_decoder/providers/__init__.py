"""
Restaurant provider layer.

Responsibilities:
- Normalize Yelp, Google Places and Geoapify responses into one
  ``CandidateRestaurant`` shape.
- Try the providers in a fixed tier order, gated by daily quotas.
- Serve fresh cached restaurants before calling any provider.
"""
