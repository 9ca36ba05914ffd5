"""Schema seeded into an empty store on first start."""

DEFAULT_SCHEMA = {
    "title": "User Registration",
    "fields": [
        {"name": "username", "label": "Username", "type": "text", "required": True, "minLength": 2},
        {"name": "email", "label": "Email", "type": "email", "required": True},
        {"name": "password", "label": "Password", "type": "password", "required": True, "minLength": 6},
        {"name": "birthdate", "label": "Birth Date", "type": "date", "required": True},
        {
            "name": "gender",
            "label": "Gender",
            "type": "select",
            "options": ["Male", "Female", "Other"],
            "required": True,
        },
    ],
}
