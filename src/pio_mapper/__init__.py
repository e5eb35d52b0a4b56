"""PIO resource mapper.

Converts the resources of a transition-of-care hand-off document between
their path-addressed tree form and flat domain objects.
"""

__version__ = "0.1.0"
