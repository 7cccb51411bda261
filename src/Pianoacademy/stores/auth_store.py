from Pianoacademy.stores.base import Store

ROLES = ("teacher", "parent")


class AuthStore(Store):
    """Signed-in user; ``current_user_id`` is the provider the firebase repositories use."""

    name = "AuthStore"

    def __init__(self, clock=None):
        self._auth_subscription = None
        super().__init__(clock)

    def _reset_state(self):
        self.user = None
        self.is_authenticated = False

    def login(self, user_data):
        self._set(user=dict(user_data), is_authenticated=True, error=None)

    def logout(self):
        self._set(user=None, is_authenticated=False, error=None)

    def update_user(self, updates):
        if self.user:
            self._set(user={**self.user, **updates})

    def switch_role(self, role):
        if role not in ROLES:
            raise ValueError(f"unknown role: {role}")
        if self.user:
            self._set(user={**self.user, "role": role})

    def is_teacher(self) -> bool:
        return bool(self.user) and self.user.get("role") == "teacher"

    def is_parent(self) -> bool:
        return bool(self.user) and self.user.get("role") == "parent"

    def current_user_id(self):
        if not self.user:
            return None
        return self.user.get("uid") or self.user.get("id")

    def bind_auth(self, auth_service):
        """Follow the auth service's sign-in state."""
        if self._auth_subscription is not None:
            self._auth_subscription.close()
        self._auth_subscription = auth_service.on_auth_state_change(self._on_auth_state)
        return self._auth_subscription

    def _on_auth_state(self, user):
        if user:
            self.login(user)
        else:
            self.logout()
