"""
Singleton dependencies for resource management.
Prevents creating a new set of collection wrappers on every API request.
"""
from typing import Optional, TYPE_CHECKING

# Avoid circular imports
if TYPE_CHECKING:
    from app.services.Attempts import AttemptService
    from app.services.Auth import AuthService
    from app.services.Tests import TestService

# Global singletons - Services
_auth_service: Optional['AuthService'] = None
_test_service: Optional['TestService'] = None
_attempt_service: Optional['AttemptService'] = None


def get_auth_service():
    """Get singleton AuthService instance"""
    global _auth_service
    if _auth_service is None:
        from app.services.Auth import AuthService
        _auth_service = AuthService()
    return _auth_service


def get_test_service():
    """Get singleton TestService instance"""
    global _test_service
    if _test_service is None:
        from app.services.Tests import TestService
        _test_service = TestService()
    return _test_service


def get_attempt_service():
    """Get singleton AttemptService instance"""
    global _attempt_service
    if _attempt_service is None:
        from app.services.Attempts import AttemptService
        _attempt_service = AttemptService()
    return _attempt_service


def cleanup_resources():
    """
    Cleanup all singleton resources. Call this on application shutdown.
    """
    global _auth_service, _test_service, _attempt_service

    _auth_service = None
    _test_service = None
    _attempt_service = None
