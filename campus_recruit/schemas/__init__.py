"""
Schemas module - Request/Response schemas for API endpoints.

All API contracts live in campus_recruit.schemas.schemas:
- Request schemas (what API accepts)
- Response schemas (what API returns), wrapped in ApiResponse
"""
