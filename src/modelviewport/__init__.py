"""
Model viewport core: bounds normalization, camera framing and load recovery
for building-model and point-cloud viewers.
"""
