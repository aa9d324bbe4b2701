from .payroll_routes import router

__all__ = ["router"]
