"""Running contexts.

- **prober**: Liveness probing (profile lock files, editor window titles)
- **browsers**: Browser executable lookup and profile-isolation arguments
- **launcher**: Open/close orchestration
"""
