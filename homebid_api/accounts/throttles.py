from rest_framework.throttling import SimpleRateThrottle


class LoginRateThrottle(SimpleRateThrottle):
    """Limits login attempts per email address, falling back to client IP."""
    scope = 'login'

    def get_cache_key(self, request, view):
        email = (request.data.get('email') or '').strip().lower()
        return self.cache_format % {
            'scope': self.scope,
            'ident': email or self.get_ident(request),
        }
