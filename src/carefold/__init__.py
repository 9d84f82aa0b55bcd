"""carefold — Patient timelines, follow-up calendars and pregnancy progress.

Turns the clinical record collections of a maternal-health case-management
backend into sorted, bucketed and classified presentation models.
"""

__version__ = "1.0.0"
