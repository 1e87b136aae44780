import io

import pytest

from httpbuilder import (
    ConnectionException,
    FormData,
    HttpClientException,
    HttpRequest,
    InvalidArgumentError,
    ResponseErrorException,
    SslCertificateException,
    Status,
    UnresolvableHostException,
)
from httpbuilder._services import TransferError, TransferOption, TransferResult


def test_method_is_normalized():
    assert HttpRequest("get", "/").method == "GET"


def test_unknown_method_is_rejected():
    with pytest.raises(InvalidArgumentError):
        HttpRequest("TRACE", "/")


@pytest.mark.parametrize(
    "method,option,value",
    [
        ("POST", TransferOption.POST, True),
        ("PUT", TransferOption.CUSTOM_REQUEST, "PUT"),
        ("PATCH", TransferOption.CUSTOM_REQUEST, "PATCH"),
        ("DELETE", TransferOption.CUSTOM_REQUEST, "DELETE"),
        ("HEAD", TransferOption.CUSTOM_REQUEST, "HEAD"),
    ],
)
def test_method_markers(method, option, value):
    assert HttpRequest(method, "/").get_transfer_option(option) == value


def test_get_has_no_method_marker():
    assert HttpRequest("GET", "/").get_transfer_options() == {}


def test_header_lookup_is_case_insensitive():
    request = HttpRequest("GET", "/").with_header("X-Test", "a")

    assert request.get_header("x-test") == "a"


def test_with_headers_append():
    request = HttpRequest("GET", "/")
    request.with_headers({"X": "a"}, False)
    request.with_headers({"X": "b"}, False)

    assert request.get_header("X", False) == ["a", "b"]


def test_with_headers_replace_all():
    request = HttpRequest("GET", "/")
    request.with_headers({"X": "a"}, False)
    request.with_headers({"X": "b"}, True)

    assert request.get_header("X", False) == ["b"]


def test_without_header():
    request = HttpRequest("GET", "/").with_header("X-Test", "a").without_header("x-test")

    assert request.get_header("X-Test") is None


def test_url_query_is_moved_into_params():
    request = HttpRequest("GET", "/p?x=1")

    assert request.get_param("x") == "1"
    assert request.url == "/p"


def test_empty_query_is_dropped_from_url():
    request = HttpRequest("GET", "/p?")

    assert request.url == "/p"
    assert request.query == {}


def test_url_query_merges_into_existing_params():
    request = HttpRequest("GET", "/p").with_params({"keep": "yes", "x": "0"})

    request.with_url("https://example.com/q?x=1&y=2#frag")

    assert request.query == {"keep": "yes", "x": "1", "y": "2"}
    assert request.url == "https://example.com/q#frag"


def test_without_param():
    request = HttpRequest("GET", "/p?x=1").without_param("x")

    assert request.get_param("x") is None


def test_json_encoding():
    request = HttpRequest("POST", "/").as_json().with_body({"foo": "bar"})

    assert request.get_encoded_body() == '{"foo":"bar"}'


def test_json_encoding_leaves_slashes_and_unicode_alone():
    request = HttpRequest("POST", "/").as_json().with_body({"url": "a/b", "name": "Zoë"})

    assert request.get_encoded_body() == '{"url":"a/b","name":"Zoë"}'


def test_json_encoding_ignores_content_type_parameters():
    request = HttpRequest("POST", "/").with_content_type("application/json; charset=utf-8")

    assert request.with_body([1, 2]).get_encoded_body() == "[1,2]"


def test_form_encoding():
    request = HttpRequest("POST", "/").with_body({"foo": "bar"})

    assert request.get_encoded_body() == "foo=bar"


def test_form_encoding_of_sequences_and_raw_strings():
    request = HttpRequest("POST", "/").with_body({"tag": ["a", "b"], "q": "x y"})

    assert request.get_encoded_body() == "tag=a&tag=b&q=x+y"
    assert request.with_body("already=encoded").get_encoded_body() == "already=encoded"


def test_text_encoding():
    request = HttpRequest("POST", "/").as_json(False)

    assert request.with_body(42).get_encoded_body() == "42"
    assert request.with_body(b"raw").get_encoded_body() == b"raw"
    assert request.with_body(b"\xff\xfe").get_encoded_body() == b"\xff\xfe"


def test_json_bytes_are_sent_as_is():
    request = HttpRequest("POST", "/").as_json().with_body(b'{"a":1}')

    assert request.get_encoded_body() == b'{"a":1}'


def test_unserializable_json_body():
    request = HttpRequest("POST", "/").as_json().with_body({"when": object()})

    with pytest.raises(InvalidArgumentError, match="JSON"):
        request.get_encoded_body()


def test_unknown_content_type_passes_body_through():
    body = {"a": 1}
    request = HttpRequest("POST", "/").with_content_type("application/xml").with_body(body)

    assert request.get_encoded_body() is body


def test_stream_body_is_read_in_full():
    stream = io.BytesIO(b"payload")
    stream.read(3)
    request = HttpRequest("PUT", "/").with_body(stream)

    assert request.get_encoded_body() == b"payload"


def test_form_data_body_is_buffered():
    form = FormData({"foo": "bar"})
    request = HttpRequest("POST", "/").with_body(form)

    assert request.get_encoded_body() == form.buffer()
    assert form.is_buffered


def test_multipart_content_type_without_form_data():
    request = HttpRequest("POST", "/").with_content_type("multipart/form-data").with_body({"a": 1})

    with pytest.raises(NotImplementedError):
        request.get_encoded_body()


def test_body_on_get_is_rejected_before_transfer(recording_executor):
    executor = recording_executor()
    request = HttpRequest("GET", "/", executor)

    with pytest.raises(InvalidArgumentError):
        request.with_body("nope")

    assert executor.calls == []


def test_body_length_sets_content_length():
    request = HttpRequest("POST", "/").with_header("Content-Length", "1")

    request.with_body("abc", 3)

    assert request.get_header("content-length", False) == ["3"]

    request.without_body()

    assert request.body is None
    assert request.get_header("Content-Length") is None


def test_as_json_and_with_content_type_replace():
    request = HttpRequest("POST", "/").with_content_type("text/csv").as_json()

    assert request.get_header("Content-Type", False) == ["application/json"]


def test_as_blob_switches_default_content_type():
    request = HttpRequest("POST", "/").as_blob()

    assert request.get_content_type() == HttpRequest.CONTENT_TYPE_BINARY
    assert request.get_transfer_option(TransferOption.BINARY_TRANSFER) is True


def test_as_blob_keeps_explicit_content_type():
    request = HttpRequest("POST", "/").as_json().as_blob()

    assert request.get_content_type() == HttpRequest.CONTENT_TYPE_JSON
    assert request.get_transfer_option(TransferOption.BINARY_TRANSFER) is True


def test_basic_authorization():
    request = HttpRequest("GET", "/").with_authorization(HttpRequest.AUTHORIZATION_BASIC, "user", "pass")

    assert request.get_header("Authorization") == "Basic dXNlcjpwYXNz"


@pytest.mark.parametrize("scheme", ["Bearer", "Digest", "OAuth"])
def test_token_authorization(scheme):
    request = HttpRequest("GET", "/").with_authorization(scheme, "token-123", "ignored")

    assert request.get_header("Authorization") == f"{scheme} token-123"


def test_unsupported_authorization_scheme():
    with pytest.raises(InvalidArgumentError):
        HttpRequest("GET", "/").with_authorization("Negotiate", "token")


def test_ssl_client_certificate_must_exist(tmp_path):
    request = HttpRequest("GET", "/")
    missing = str(tmp_path / "missing.pem")

    with pytest.raises(InvalidArgumentError):
        request.with_ssl_client_certificate(missing)

    with pytest.raises(InvalidArgumentError):
        request.with_ssl_client_key(missing)

    request.with_ssl_client_certificate(missing, force=True)

    assert request.ssl_client_certificate == missing


def test_ssl_client_auth_is_passed_to_transport(tmp_path, recording_executor):
    cert = tmp_path / "client.pem"
    key = tmp_path / "client.key"
    cert.write_text("cert")
    key.write_text("key")
    executor = recording_executor()

    (
        HttpRequest("GET", "https://example.com", executor)
        .with_ssl_client_certificate(str(cert))
        .with_ssl_client_certificate_password("cert-secret")
        .with_ssl_client_key(str(key))
        .with_ssl_client_key_password("key-secret")
        .run()
    )

    assert executor.options[TransferOption.SSL_CERT] == str(cert)
    assert executor.options[TransferOption.SSL_CERT_PASSWORD] == "cert-secret"
    assert executor.options[TransferOption.SSL_KEY] == str(key)
    assert executor.options[TransferOption.SSL_KEY_PASSWORD] == "key-secret"


def test_timeout_and_redirect_options():
    request = HttpRequest("GET", "/").with_timeout(5).follow_redirects(False)

    assert request.timeout == 5
    assert request.get_transfer_option(TransferOption.CONNECT_TIMEOUT) == 5
    assert request.get_transfer_option(TransferOption.FOLLOW_LOCATION) is False

    request.without_transfer_option(TransferOption.TIMEOUT)

    assert request.timeout is None


def test_run_configures_transfer(recording_executor):
    executor = recording_executor()

    (
        HttpRequest("POST", "https://example.com/items?page=2", executor)
        .with_param("tag", "new")
        .with_header("X-Trace", "abc")
        .as_json()
        .with_body({"name": "widget"})
        .run()
    )

    options = executor.options
    assert options[TransferOption.URL] == "https://example.com/items?page=2&tag=new"
    assert options[TransferOption.POST] is True
    assert options[TransferOption.OK_STATUSES] == Status.ERROR_CODES
    assert options[TransferOption.FAIL_ON_ERROR] is False
    assert options[TransferOption.POST_FIELDS] == b'{"name":"widget"}'
    assert "X-Trace: abc" in options[TransferOption.HTTP_HEADER]
    assert "Content-Length: 17" in options[TransferOption.HTTP_HEADER]
    assert TransferOption.UPLOAD not in options


def test_run_without_query_leaves_url_untouched(recording_executor):
    executor = recording_executor()

    HttpRequest("GET", "https://example.com/items", executor).run()

    assert executor.options[TransferOption.URL] == "https://example.com/items"
    assert TransferOption.POST_FIELDS not in executor.options


def test_run_keeps_explicit_content_length(recording_executor):
    executor = recording_executor()

    HttpRequest("PUT", "/", executor).with_body("abc", 10).run()

    assert "Content-Length: 10" in executor.options[TransferOption.HTTP_HEADER]
    assert executor.options[TransferOption.CUSTOM_REQUEST] == "PUT"


def test_run_streams_multipart_bodies(recording_executor):
    executor = recording_executor()
    form = FormData({"foo": "bar"})

    HttpRequest("POST", "/upload", executor).with_body(form).run()

    options = executor.options
    assert options[TransferOption.UPLOAD] is True
    assert options[TransferOption.CUSTOM_REQUEST] == "POST"
    assert options[TransferOption.READ_FUNCTION] == form.read
    assert f"Content-Type: {form.content_type}" in options[TransferOption.HTTP_HEADER]
    assert f"Content-Length: {form.content_length}" in options[TransferOption.HTTP_HEADER]
    assert form.is_sealed
    assert executor.uploaded.endswith(f"--{form.boundary}--\r\n".encode())


def test_run_omits_content_length_for_unknown_multipart_size(recording_executor):
    executor = recording_executor()
    form = FormData().add_file("data", io.BytesIO(b"abc"), "text/plain")

    HttpRequest("POST", "/upload", executor).with_body(form).run()

    assert not any(line.startswith("Content-Length") for line in executor.options[TransferOption.HTTP_HEADER])
    assert b"\r\n\r\nabc\r\n" in executor.uploaded


def test_run_streams_stream_bodies(recording_executor):
    executor = recording_executor()
    stream = io.BytesIO(b"0123456789")

    HttpRequest("PATCH", "/", executor).with_body(stream).run()

    options = executor.options
    assert options[TransferOption.UPLOAD] is True
    assert options[TransferOption.IN_FILE] is stream
    assert options[TransferOption.IN_FILE_SIZE] == 10
    assert options[TransferOption.CUSTOM_REQUEST] == "PATCH"
    assert "Content-Length: 10" in options[TransferOption.HTTP_HEADER]
    assert executor.uploaded == b"0123456789"


def test_run_collects_response_headers(recording_executor):
    executor = recording_executor(
        TransferResult(status_code=201, body=b"{}"),
        headers=[("Content-Type", "application/json"), ("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")],
    )

    response = HttpRequest("GET", "/", executor).run()

    assert response.status_code == 201
    assert response.get_header("content-type") == "application/json"
    assert response.get_header("SET-COOKIE", False) == ["a=1", "b=2"]
    assert response.get_parsed_body() == {}


def test_redirect_status_is_not_a_failure(recording_executor):
    executor = recording_executor(TransferResult(status_code=304))

    assert HttpRequest("GET", "/", executor).run().status_code == 304


def test_error_status_raises_response_error(recording_executor):
    executor = recording_executor(TransferResult(status_code=404, body=b"missing"))

    with pytest.raises(ResponseErrorException) as exc_info:
        HttpRequest("GET", "/", executor).run()

    assert exc_info.value.code == 404
    assert exc_info.value.response.body == b"missing"


@pytest.mark.parametrize(
    "error,exception",
    [
        (TransferError.SSL_CACERT, SslCertificateException),
        (TransferError.SSL_CONNECT_ERROR, SslCertificateException),
        (TransferError.SSL_PINNEDPUBKEYNOTMATCH, SslCertificateException),
        (TransferError.COULDNT_CONNECT, ConnectionException),
        (TransferError.TOO_MANY_REDIRECTS, ConnectionException),
        (TransferError.GOT_NOTHING, ConnectionException),
        (TransferError.RECV_ERROR, ConnectionException),
    ],
)
def test_transfer_errors_are_classified(recording_executor, error, exception):
    executor = recording_executor(TransferResult(error_code=error, error_message="boom"))

    with pytest.raises(exception) as exc_info:
        HttpRequest("GET", "https://example.com", executor).run()

    assert exc_info.value.code == error
    assert "boom" in exc_info.value.message


def test_unresolvable_host_carries_hostname(recording_executor):
    executor = recording_executor(
        TransferResult(error_code=TransferError.COULDNT_RESOLVE_HOST, error_message="no such host")
    )

    with pytest.raises(UnresolvableHostException) as exc_info:
        HttpRequest("GET", "https://nowhere.invalid/path?q=1", executor).run()

    assert exc_info.value.hostname == "nowhere.invalid"
    assert exc_info.value.code == TransferError.COULDNT_RESOLVE_HOST


def test_other_transfer_errors_raise_generic_exception(recording_executor):
    executor = recording_executor(
        TransferResult(error_code=TransferError.OPERATION_TIMEDOUT, error_message="timed out")
    )

    with pytest.raises(HttpClientException) as exc_info:
        HttpRequest("GET", "/", executor).run()

    assert type(exc_info.value) is HttpClientException
    assert exc_info.value.code == 28
    assert "timed out" in str(exc_info.value)
