"""
Permissions and Roles Configuration
This config defines the permission matrix for all modules and the grants of each role.
Used by the seed script to populate/update the permissions and role_permissions tables.
"""

# Define modules and their actions
MODULES = {
    "dashboard": {
        "actions": ["view"],
        "description": "Dashboard summaries"
    },
    "materials": {
        "actions": ["view", "create", "update", "delete"],
        "description": "Material master data and stock levels"
    },
    "machines": {
        "actions": ["view", "create", "update", "delete"],
        "description": "Machine (capital equipment) register"
    },
    "material_transactions": {
        "actions": ["view", "create"],
        "description": "Material receipts, issues and adjustments"
    },
    "machine_transactions": {
        "actions": ["view", "create"],
        "description": "Machine borrow, service and damage events"
    },
    "reports": {
        "actions": ["view", "export"],
        "description": "Inventory reports and analytics"
    },
    "users": {
        "actions": ["view", "manage_roles", "delete"],
        "description": "User and role administration"
    }
}

# Human readable descriptions for actions that need more than "<Action> <module>"
ACTION_DESCRIPTIONS = {
    "users": {
        "manage_roles": "Assign roles and manage role permissions"
    },
    "reports": {
        "export": "Export report data"
    }
}

# Role grants; "*" grants every action of the module
ROLE_GRANTS = {
    "admin": {
        "description": "Full administrative access",
        "modules": {module_name: ["*"] for module_name in MODULES}
    },
    "user": {
        "description": "Day-to-day inventory operations",
        "modules": {
            "dashboard": ["view"],
            "materials": ["view"],
            "machines": ["view"],
            "material_transactions": ["view", "create"],
            "machine_transactions": ["view", "create"],
            "reports": ["view"]
        }
    }
}


def permission_name(module: str, action: str) -> str:
    return f"{module}.{action}"


# Generate permission matrix
def get_permission_matrix():
    """
    Returns a dictionary with all permissions and their associated roles
    Format: {
        "permissions": [
            {"name": "materials.view", "module": "materials", "action": "view", "description": "..."},
            ...
        ],
        "roles": [
            {
                "name": "admin",
                "description": "...",
                "permissions": ["dashboard.view", "materials.create", ...]
            },
            ...
        ]
    }
    """
    permissions = []
    roles = []

    for module_name, module_config in MODULES.items():
        for action in module_config["actions"]:
            description = ACTION_DESCRIPTIONS.get(module_name, {}).get(
                action, f"{action.replace('_', ' ').capitalize()} {module_name.replace('_', ' ')}"
            )
            permissions.append({
                "name": permission_name(module_name, action),
                "module": module_name,
                "action": action,
                "description": description
            })

    for role_name, role_config in ROLE_GRANTS.items():
        role_permissions = []
        for module_name, actions in role_config["modules"].items():
            module_actions = MODULES[module_name]["actions"]
            granted = module_actions if "*" in actions else [a for a in actions if a in module_actions]
            role_permissions.extend(permission_name(module_name, action) for action in granted)
        roles.append({
            "name": role_name,
            "description": role_config["description"],
            "permissions": sorted(role_permissions)
        })

    return {
        "permissions": permissions,
        "roles": roles
    }


# Export the matrix for use in seed scripts
PERMISSION_MATRIX = get_permission_matrix()
