"""
RiesgoVial: accident-risk map backend with realtime synchronization.
"""
