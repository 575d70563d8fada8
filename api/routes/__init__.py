"""Route handlers following Single Responsibility Principle

Each router module handles a single resource/concept:
- operations: Playground CRUD and aggregation endpoints
- collection: Collection stats, reset and index creation
- performance: Performance log and insights
- analysis: GitHub repository analyzer
- health: Health/monitoring endpoints
"""
