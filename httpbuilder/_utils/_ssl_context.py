import os
import ssl
from typing import TYPE_CHECKING, Any, Dict, Optional

from .constants import ENV_DISABLE_SSL_VERIFY, TRUTHY_ENV_VALUES

if TYPE_CHECKING:
    from .._config import Config


def expand_path(path):
    """Expand environment variables and user home directory in path."""
    if not path:
        return path
    # Expand environment variables like $HOME
    path = os.path.expandvars(path)
    # Expand user home directory ~
    path = os.path.expanduser(path)
    return path


def create_ssl_context(verify: bool = True) -> ssl.SSLContext:
    if not verify:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    # Try truststore first (system certificates)
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        # Fallback to manual certificate configuration
        import certifi

        ssl_cert_file = expand_path(os.environ.get("SSL_CERT_FILE"))
        requests_ca_bundle = expand_path(os.environ.get("REQUESTS_CA_BUNDLE"))
        ssl_cert_dir = expand_path(os.environ.get("SSL_CERT_DIR"))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )


def load_client_certificate(
    context: ssl.SSLContext,
    cert_file: str,
    key_file: Optional[str] = None,
    password: Optional[str] = None,
) -> ssl.SSLContext:
    """Attach a TLS client certificate (and optionally a separate key) to a context.

    Python's ``ssl`` module takes a single password for the private key, so
    callers pass whichever password protects the key material.
    """
    context.load_cert_chain(
        certfile=expand_path(cert_file),
        keyfile=expand_path(key_file) or None,
        password=password or None,
    )
    return context


def ssl_verification_disabled() -> bool:
    return os.environ.get(ENV_DISABLE_SSL_VERIFY, "").lower() in TRUTHY_ENV_VALUES


def get_httpx_client_kwargs(config: Optional["Config"] = None) -> Dict[str, Any]:
    """Get standardized httpx client configuration."""
    follow_redirects = config.follow_redirects if config else True
    verify = config.verify_ssl if config else True
    client_kwargs: Dict[str, Any] = {"follow_redirects": follow_redirects}

    if config is not None:
        client_kwargs["timeout"] = config.httpx_timeout()
    else:
        client_kwargs["timeout"] = 30.0

    if ssl_verification_disabled() or not verify:
        client_kwargs["verify"] = False
    else:
        # Use system certificates with truststore fallback
        client_kwargs["verify"] = create_ssl_context()

    # HTTP_PROXY, HTTPS_PROXY, NO_PROXY are read by httpx by default

    return client_kwargs
