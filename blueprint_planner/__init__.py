"""
Blueprint Planner - Construction blueprint annotation tool

Managers draw pipes and connections over blueprint images and assign them
to workers; workers mark their own elements complete.
"""

__version__ = "0.3.0"
