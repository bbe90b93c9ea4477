import unittest

from app.config.permissions_config import (
    ROLE_PERMISSIONS,
    WILDCARD,
    Permission,
    Role,
    expand_permissions,
    get_permission_matrix,
    is_allowed,
    permissions_for,
)


class PermissionTableTests(unittest.TestCase):
    def test_is_allowed_matches_table_for_every_role_and_permission(self):
        for role, granted in ROLE_PERMISSIONS.items():
            for permission in Permission:
                expected = permission.value in granted or WILDCARD in granted
                self.assertEqual(is_allowed(role, permission), expected, f"{role} {permission}")

    def test_super_admin_has_everything(self):
        for permission in Permission:
            self.assertTrue(is_allowed(Role.SUPER_ADMIN, permission))
        self.assertTrue(is_allowed("super_admin", "anything:else"))

    def test_editor_cannot_delete(self):
        self.assertTrue(is_allowed(Role.EDITOR, Permission.BLOG_UPDATE))
        self.assertFalse(is_allowed(Role.EDITOR, Permission.BLOG_DELETE))
        self.assertFalse(is_allowed(Role.EDITOR, Permission.CONTACT_DELETE))

    def test_user_role_is_read_only_plus_contact(self):
        self.assertEqual(
            permissions_for(Role.USER),
            frozenset({"services:read", "blog:read", "training:read", "contact:create"}),
        )
        self.assertFalse(is_allowed(Role.USER, Permission.BLOG_CREATE))

    def test_admin_cannot_manage_accounts(self):
        self.assertTrue(is_allowed(Role.ADMIN, Permission.USERS_READ))
        self.assertFalse(is_allowed(Role.ADMIN, Permission.USERS_CREATE))
        self.assertFalse(is_allowed(Role.ADMIN, Permission.USERS_UPDATE))

    def test_unknown_role_has_no_permissions(self):
        self.assertEqual(permissions_for("owner"), frozenset())
        self.assertEqual(permissions_for(None), frozenset())
        self.assertFalse(is_allowed("owner", Permission.SERVICES_READ))

    def test_no_prefix_matching(self):
        self.assertFalse(is_allowed(Role.ADMIN, "blog"))
        self.assertFalse(is_allowed(Role.ADMIN, "blog:*"))

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            ROLE_PERMISSIONS[Role.USER] = frozenset({WILDCARD})

    def test_expand_permissions(self):
        self.assertEqual(len(expand_permissions(Role.SUPER_ADMIN)), len(Permission))
        self.assertEqual(expand_permissions(Role.USER), sorted(permissions_for(Role.USER)))
        self.assertNotIn(WILDCARD, expand_permissions(Role.SUPER_ADMIN))

    def test_permission_matrix_shape(self):
        matrix = get_permission_matrix()
        names = {p["name"] for p in matrix["permissions"]}
        self.assertEqual(names, {p.value for p in Permission})
        roles = {r["name"]: r["permissions"] for r in matrix["roles"]}
        self.assertEqual(roles["super_admin"], [WILDCARD])
        self.assertIn("contact:read", roles["editor"])


if __name__ == "__main__":
    unittest.main()
