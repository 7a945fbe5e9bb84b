"""Base HTTP client for platform APIs with typed errors and retry logic."""

import logging
import time
from functools import wraps

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

log = logging.getLogger(__name__)

class APIError(Exception):
    """Base exception for platform API errors."""
    def __init__(self, message, status_code=None, response=None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)

    def payload(self):
        """Decoded JSON body of the failed response, or None."""
        if self.response is None:
            return None
        try:
            return self.response.json()
        except ValueError:
            return None

class AuthenticationError(APIError):
    """Authentication error with API."""
    pass

class RateLimitError(APIError):
    """Rate limit exceeded error."""
    pass

class ServerError(APIError):
    """Server-side API error."""
    pass

class ConnectionFailure(APIError):
    """The request never got a response."""
    pass

RETRYABLE_ERRORS = (ServerError, RateLimitError, ConnectionFailure)

def retry(max_tries=3, delay=1, backoff=2, exceptions=RETRYABLE_ERRORS):
    """Retry decorator with exponential backoff."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            mtries, mdelay = max_tries, delay
            last_exception = None

            while mtries > 0:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    mtries -= 1
                    if mtries == 0:
                        break
                    log.warning(f"{func.__name__}: {str(e)}, Retrying in {mdelay} seconds...")
                    time.sleep(mdelay)
                    mdelay *= backoff

            raise last_exception
        return wrapper
    return decorator

class PlatformClient:
    """Base client for a platform's public API."""

    def __init__(self, base_url, timeout=10, max_tries=3, retry_delay=1, session=None):
        self.base_url = base_url
        self.timeout = timeout
        self.max_tries = max_tries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', 'codevance-sync/1.0')

    def request(self, method, endpoint, headers=None, params=None, data=None, json=None):
        """Make an HTTP request, retrying transient failures."""
        send = retry(max_tries=self.max_tries, delay=self.retry_delay)(self._send)
        return send(method, endpoint, headers=headers, params=params, data=data, json=json)

    def get(self, endpoint, **kwargs):
        return self.request('GET', endpoint, **kwargs)

    def post(self, endpoint, **kwargs):
        return self.request('POST', endpoint, **kwargs)

    def _send(self, method, endpoint, headers=None, params=None, data=None, json=None):
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                data=data,
                json=json,
                timeout=self.timeout
            )

            # Check for HTTP errors
            response.raise_for_status()

            return response.json() if response.content else None

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code
            if status in (401, 403):
                raise AuthenticationError("Authentication failed", status_code=status, response=e.response)
            elif status == 429:
                raise RateLimitError("Rate limit exceeded", status_code=status, response=e.response)
            elif status >= 500:
                raise ServerError(f"Server error: {e}", status_code=status, response=e.response)
            else:
                raise APIError(f"HTTP error: {e}", status_code=status, response=e.response)
        except (ConnectionError, Timeout) as e:
            raise ConnectionFailure(f"Connection error: {e}")
        except ValueError as e:
            raise APIError(f"Invalid JSON from {url}: {e}")
        except RequestException as e:
            raise APIError(f"Request failed: {e}")
