"""
Crowdcast: occupancy snapshots and short-horizon forecasts.

- ``domain``: occupancy and prediction entities, forecasting models,
  repository and data-source ports
- ``application``: freshness gate, regeneration, history and prediction
  use cases with their DTOs
- ``infrastructure``: MongoDB, the synthetic source, health probes, Celery
- ``presentation``: FastAPI routers
- ``shared``: logging and environment helpers
- ``main``: settings, container and entry points
"""
