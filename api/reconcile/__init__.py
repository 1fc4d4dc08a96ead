"""
Reconcile file records against the shared filesystem.
"""
