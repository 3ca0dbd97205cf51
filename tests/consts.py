TEST_ADMIN_SECRET = "test-admin-secret"
ADMIN_HEADERS = {"Authorization": f"Bearer {TEST_ADMIN_SECRET}"}
