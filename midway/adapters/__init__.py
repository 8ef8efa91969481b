"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Routing services (Mapbox Directions, offline straight-line estimate)
- Places search (Mapbox Geocoding)
- Map surfaces (in-memory, Folium)
- Caching systems (in-memory, null)
"""
