import pytest
from stockroom.supabase.auth import SupabaseAuthentication
from stockroom.config import set_config_for_test

class MockAuth:
    def __init__(self):
        self.signed_in = None
        self.signed_out = False

    def sign_in_with_password(self, credentials):
        self.signed_in = credentials
        return type("AuthResponse", (), {"session": {"user": credentials["email"]}})()

    def sign_out(self):
        self.signed_out = True

class MockSupabaseClient:
    def __init__(self, url, key):
        self.url = url
        self.key = key
        self.auth = MockAuth()

@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for var in ["SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"]:
        monkeypatch.delenv(var, raising=False)

@pytest.fixture(autouse=True)
def patch_create_client(monkeypatch):
    monkeypatch.setattr("supabase.create_client", MockSupabaseClient)
    yield

def test_service_role_key(monkeypatch):
    """Test service role config (url + service role key wins over anon key)."""
    set_config_for_test(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="service-key",
        supabase_anon_key="anon-key",
    )
    client = SupabaseAuthentication().get_client()
    assert client.url == "https://test.supabase.co"
    assert client.key == "service-key"

def test_anon_key(monkeypatch):
    """Test anon key config (url + anon key)."""
    set_config_for_test(
        supabase_url="https://test.supabase.co",
        supabase_service_role_key=None,
        supabase_anon_key="anon-key",
    )
    client = SupabaseAuthentication().get_client()
    assert client.key == "anon-key"

def test_client_is_reused(monkeypatch):
    """Test the client is created once per authentication handler."""
    set_config_for_test(supabase_url="https://test.supabase.co", supabase_anon_key="anon-key")
    auth = SupabaseAuthentication()
    assert auth.get_client() is auth.get_client()

def test_missing_config(monkeypatch):
    """Test error if no config is available."""
    set_config_for_test(
        supabase_url=None,
        supabase_service_role_key=None,
        supabase_anon_key=None,
    )
    auth = SupabaseAuthentication()
    with pytest.raises(RuntimeError):
        _ = auth.get_client()

def test_missing_key(monkeypatch):
    """Test error if only the URL is configured."""
    set_config_for_test(supabase_url="https://test.supabase.co", supabase_service_role_key=None, supabase_anon_key=None)
    with pytest.raises(RuntimeError):
        _ = SupabaseAuthentication().get_supabase_credentials()

def test_sign_in_and_out(monkeypatch):
    """Test sign in returns the session and sign out reaches the client."""
    set_config_for_test(supabase_url="https://test.supabase.co", supabase_anon_key="anon-key")
    auth = SupabaseAuthentication()
    session = auth.sign_in("staff@example.com", "secret")
    assert session == {"user": "staff@example.com"}
    assert auth.get_client().auth.signed_in == {"email": "staff@example.com", "password": "secret"}
    auth.sign_out()
    assert auth.get_client().auth.signed_out
