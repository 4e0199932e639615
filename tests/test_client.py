from datetime import date

import pytest
import requests

import met_collection.client as client_mod
from met_collection import (
    ClientConfig,
    DecodeError,
    MetClient,
    ObjectOptions,
    ObjectsOptions,
    SearchOptions,
    StatusError,
    TransportError,
    ValidationError,
)

ROOT = "https://collectionapi.example.org/public/collection/v1/"


def test_config_defaults():
    config = ClientConfig()

    assert config.root_url == "https://collectionapi.metmuseum.org/public/collection/v1/"
    assert config.session is None
    assert config.timeout is None
    assert config.verify is True


def test_config_adds_trailing_slash():
    assert ClientConfig(root_url="http://localhost:8000/v1").root_url == "http://localhost:8000/v1/"


def test_objects_builds_url_and_decodes(client, session, fake_response):
    session.queue(fake_response({"total": 2, "objectIDs": [10, 11]}))

    result = client.objects(ObjectsOptions(metadata_date=date(2024, 1, 2), department_ids=[1, 6]))

    assert result.total == len(result.object_ids) == 2
    assert session.calls[0]["url"] == f"{ROOT}objects?metadataDate=2024-01-02&departmentIds=1|6"


def test_objects_without_options(client, session, fake_response):
    session.queue(fake_response({"total": 0, "objectIDs": []}))

    client.objects()

    assert session.calls[0]["url"] == f"{ROOT}objects"


def test_get_object(client, session, fake_response):
    session.queue(fake_response({"objectID": 436535, "title": "Wheat Field with Cypresses"}))

    obj = client.get_object(ObjectOptions(object_id=436535))

    assert obj.object_id == 436535
    assert session.calls[0]["url"] == f"{ROOT}objects/436535"


def test_get_object_not_found_is_status_error(client, session, fake_response):
    session.queue(fake_response({"message": "Not a valid object"}, status_code=404))

    with pytest.raises(StatusError) as exc_info:
        client.get_object(ObjectOptions(object_id=-1))

    assert exc_info.value.status_code == 404
    assert exc_info.value.url == f"{ROOT}objects/-1"


def test_non_200_success_status_is_still_an_error(client, session, fake_response):
    session.queue(fake_response({"total": 0, "objectIDs": []}, status_code=204))

    with pytest.raises(StatusError):
        client.objects()


def test_status_error_body_not_decoded(client, session, fake_response):
    session.queue(fake_response(status_code=500, text="<html>oops</html>"))

    with pytest.raises(StatusError):
        client.departments()


def test_departments(client, session, fake_response):
    session.queue(fake_response({
        "departments": [
            {"departmentId": 1, "displayName": "American Decorative Arts"},
            {"departmentId": 3, "displayName": "Ancient Near Eastern Art"},
        ],
    }))

    result = client.departments()

    assert result.departments
    assert result.departments[0].department_id == 1
    assert session.calls[0]["url"] == f"{ROOT}departments"


def test_search(client, session, fake_response):
    session.queue(fake_response({"total": 2, "objectIDs": [436524, 436535]}))

    result = client.search(SearchOptions(q="sunflowers", is_highlight=True, date_begin=1700, date_end=1900))

    assert result.object_ids == [436524, 436535]
    assert session.calls[0]["url"] == (
        f"{ROOT}search?q=sunflowers&isHighlight=true&dateBegin=1700&dateEnd=1900"
    )


def test_search_half_range_fails_before_request(client, session):
    with pytest.raises(ValidationError):
        client.search(SearchOptions(q="sunflowers", date_begin=1700))

    assert session.calls == []


def test_invalid_json_is_decode_error(client, session, fake_response):
    session.queue(fake_response(text="not json"))

    with pytest.raises(DecodeError):
        client.objects()


def test_wrong_top_level_shape_is_decode_error(client, session, fake_response):
    session.queue(fake_response([1, 2, 3]))

    with pytest.raises(DecodeError):
        client.search(SearchOptions(q="x"))


@pytest.mark.parametrize("error", [
    requests.ConnectionError("refused"),
    requests.Timeout("too slow"),
])
def test_network_failure_is_transport_error(client, session, error):
    session.queue(error)

    with pytest.raises(TransportError) as exc_info:
        client.departments()

    assert exc_info.value.__cause__ is error
    assert len(session.calls) == 1


def test_config_passed_to_session(session, fake_response):
    config = ClientConfig(
        root_url=ROOT,
        session=session,
        timeout=2.5,
        verify=False,
        headers={"User-Agent": "met-collection-tests"},
    )
    session.queue(fake_response({"departments": []}))

    MetClient(config).departments()

    call = session.calls[0]
    assert call["timeout"] == 2.5
    assert call["verify"] is False
    assert call["headers"] == {"User-Agent": "met-collection-tests"}


def test_no_timeout_by_default(client, session, fake_response):
    session.queue(fake_response({"departments": []}))

    client.departments()

    assert session.calls[0]["timeout"] is None
    assert session.calls[0]["headers"] is None


def test_with_session(session, fake_response):
    session.queue(fake_response({"departments": []}))

    MetClient.with_session(session, root_url=ROOT, timeout=1).departments()

    assert session.calls[0]["timeout"] == 1


def test_default_transport_is_requests_get(monkeypatch, fake_response):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return fake_response({"total": 1, "objectIDs": [1]})

    monkeypatch.setattr(client_mod.requests, "get", fake_get)

    result = MetClient(ClientConfig(root_url=ROOT)).objects()

    assert result.object_ids == [1]
    assert calls == [f"{ROOT}objects"]


def test_module_functions_use_default_client(monkeypatch, fake_response):
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        return fake_response({"departments": [{"departmentId": 1, "displayName": "American Decorative Arts"}]})

    monkeypatch.setattr(client_mod, "_default_client", None)
    monkeypatch.setattr(client_mod.requests, "get", fake_get)

    result = client_mod.departments()

    assert result.departments[0].display_name == "American Decorative Arts"
    assert calls == [f"{client_mod.DEFAULT_ROOT_URL}departments"]
    assert client_mod.default_client() is client_mod.default_client()


def test_unreasonably_short_timeout_is_transport_error(silent_server):
    real_session = requests.Session()
    real_session.trust_env = False  # no proxy between us and the local socket
    client = MetClient(ClientConfig(root_url=silent_server, session=real_session, timeout=0.01))

    with pytest.raises(TransportError) as exc_info:
        client.objects()
    real_session.close()

    assert isinstance(exc_info.value.__cause__, requests.Timeout)


def test_logger_receives_request_and_summary(client, session, fake_response):
    logs = []
    client.set_logger(lambda level, message: logs.append((level, message)))
    session.queue(fake_response({"total": 1, "objectIDs": [5]}))

    client.objects()

    assert logs[0][0] == "INFO"
    assert logs[0][1].startswith(f"[MET] GET {ROOT}objects")
    assert logs[-1] == ("INFO", "[MET] Received 1 object IDs (total=1)")


def test_errors_are_not_logged(client, session, fake_response):
    logs = []
    client.set_logger(lambda level, message: logs.append(level))
    session.queue(fake_response(status_code=404, text=""))

    with pytest.raises(StatusError):
        client.get_object(ObjectOptions(object_id=-1))

    assert "ERROR" not in logs


def test_config_headers_are_read_only_and_copied():
    headers = {"User-Agent": "met-collection-tests"}
    config = ClientConfig(headers=headers)
    headers["User-Agent"] = "changed"

    assert config.headers["User-Agent"] == "met-collection-tests"
    with pytest.raises(TypeError):
        config.headers["X-Extra"] = "1"  # type: ignore[index]


def test_config_is_hashable():
    assert hash(ClientConfig(headers={"User-Agent": "a"})) == hash(ClientConfig(headers={"User-Agent": "b"}))
    assert ClientConfig(headers={"User-Agent": "a"}) == ClientConfig(headers={"User-Agent": "a"})
