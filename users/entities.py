class User:
    def __init__(self, email, password_hash, name, id=None, phone=None, is_active=True,
                 role="user", created_at=None, updated_at=None):
        if not email:
            raise ValueError("User email is required")
        if not password_hash:
            raise ValueError("User password hash is required")
        if not name:
            raise ValueError("User name is required")

        self.id = id
        self.email = email.strip().lower()
        self.password_hash = password_hash
        self.name = name
        self.phone = phone
        self.is_active = is_active
        self.role = role
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_admin(self):
        return self.role == "admin"

    def __repr__(self):
        return f"User(id={self.id!r}, email={self.email!r})"
