"""
Repositories package — data-access layer.

Each repository file handles all store operations for one collection.
Repositories do NOT handle HTTP concerns or business logic beyond
basic data integrity.

Convention:
    - One file per collection (participants.py, programs.py, staff.py)
    - All functions accept a `DocumentStore` as the first argument
"""
