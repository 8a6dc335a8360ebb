# backend/crewtrack/__init__.py
"""
Crew training compliance backend.

The status classifier, urgency ordering and rollup trees live in
crewtrack/apps/compliance; crewtrack/utils holds the shared helpers.
"""
