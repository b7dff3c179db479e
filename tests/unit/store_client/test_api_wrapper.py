"""Unit tests for store_client.api_wrapper module."""

import json

import pytest
from unittest.mock import Mock, patch
from requests.exceptions import ConnectionError, HTTPError, Timeout

from src.models import ConverterRecord, PageRecord, TimerRecord
from src.store_client.api_wrapper import StoreAPI
from src.store_client.auth import Credentials
from src.store_client.errors import (
    InvalidCredentialsError,
    NotFoundError,
    PageNotFoundError,
    StoreUnreachableError,
    StoreValidationError,
    TransportError,
    UnauthorizedError,
)
from tests.fixtures import (
    CONVERTERS_RESPONSE,
    DASHBOARD_RESPONSE,
    PAGE_ID,
    make_converter,
    make_page,
    make_timer,
)

BASE_URL = 'http://localhost:5690/api/users'


def create_mock_auth(token='token123'):
    """Create a mock authenticator with standard credentials."""
    mock_auth = Mock()
    mock_auth.get_url.return_value = BASE_URL
    mock_auth.get_credentials.return_value = Credentials(url=BASE_URL, token=token)
    return mock_auth


def make_response(body=None, status_code=200):
    """Build a requests.Response stand-in."""
    response = Mock()
    response.status_code = status_code
    response.content = json.dumps(body).encode() if body is not None else b''
    response.json.return_value = body
    if status_code >= 400:
        response.raise_for_status.side_effect = HTTPError(response=response)
    return response


@pytest.fixture
def mock_session():
    with patch('src.store_client.api_wrapper.requests.Session') as session_cls:
        session = Mock()
        session.headers = {}
        session_cls.return_value = session
        yield session


@pytest.fixture
def api():
    return StoreAPI(create_mock_auth(), timeout=5)


class TestStoreAPIRequest:
    """Test cases for request plumbing."""

    def test_init_lazy_creates_session(self, mock_session):
        """No HTTP session or credentials are touched until the first call."""
        mock_auth = create_mock_auth()
        StoreAPI(mock_auth)
        mock_auth.get_credentials.assert_not_called()

    def test_sends_bearer_token_and_timeout(self, api, mock_session):
        mock_session.request.return_value = make_response(DASHBOARD_RESPONSE)

        api.list_pages()

        mock_session.request.assert_called_once_with(
            'GET',
            f'{BASE_URL}/dashboard',
            json=None,
            headers={'Authorization': 'Bearer token123'},
            timeout=5,
        )
        assert mock_session.headers['Accept'] == 'application/json'

    def test_missing_token_raises_before_request(self, mock_session):
        mock_auth = create_mock_auth()
        mock_auth.get_credentials.side_effect = InvalidCredentialsError(BASE_URL)

        with pytest.raises(InvalidCredentialsError):
            StoreAPI(mock_auth).list_pages()
        mock_session.request.assert_not_called()

    def test_empty_body_returns_empty_dict(self, api, mock_session):
        mock_session.request.return_value = make_response(None)
        assert api._request('DELETE', 'deleteTimer/t1', 'delete') == {}

    def test_invalid_json_raises_transport_error(self, api, mock_session):
        response = make_response({})
        response.content = b'<html>'
        response.json.side_effect = ValueError("no json")
        mock_session.request.return_value = response

        with pytest.raises(TransportError):
            api.list_pages()


class TestStoreAPIErrorTranslation:
    """Test cases for _translate_error()."""

    @pytest.mark.parametrize("exception", [ConnectionError("refused"), Timeout("slow")])
    def test_unreachable(self, api, mock_session, exception):
        mock_session.request.side_effect = exception

        with pytest.raises(StoreUnreachableError) as exc_info:
            api.list_pages()
        assert exc_info.value.endpoint == BASE_URL

    @pytest.mark.parametrize("status", [401, 403])
    def test_unauthorized(self, api, mock_session, status):
        mock_session.request.return_value = make_response({'message': 'nope'}, status)

        with pytest.raises(UnauthorizedError):
            api.list_pages()

    def test_404_on_page_operation_is_page_not_found(self, api, mock_session):
        mock_session.request.return_value = make_response({}, 404)

        with pytest.raises(PageNotFoundError) as exc_info:
            api.delete_page(PAGE_ID)
        assert exc_info.value.page_id == PAGE_ID

    def test_404_on_timer_is_not_found(self, api, mock_session):
        mock_session.request.return_value = make_response({}, 404)

        with pytest.raises(NotFoundError) as exc_info:
            api.delete_timer('t1')
        assert not isinstance(exc_info.value, PageNotFoundError)
        assert exc_info.value.entity == 'timer'

    def test_400_carries_server_message(self, api, mock_session):
        mock_session.request.return_value = make_response(
            {'message': 'Please enter a valid duration'}, 400
        )

        with pytest.raises(StoreValidationError) as exc_info:
            api.create_timer(PAGE_ID, 'Boil', 60)
        assert str(exc_info.value) == 'Please enter a valid duration'
        assert exc_info.value.status_code == 400

    def test_500_is_transport_error(self, api, mock_session):
        mock_session.request.return_value = make_response({}, 500)

        with pytest.raises(TransportError) as exc_info:
            api.list_pages()
        assert 'HTTP 500' in str(exc_info.value)

    def test_sanitize_credentials(self, api):
        text = 'Authorization: Bearer abc.def\npassword=hunter2 token: "xyz"'
        sanitized = api._sanitize_credentials(text)

        assert 'abc.def' not in sanitized
        assert 'hunter2' not in sanitized
        assert 'xyz' not in sanitized

    @pytest.mark.parametrize("bad_id", ['', '  ', '../pages', 'a/b', 'id?x=1'])
    def test_invalid_ids_rejected(self, api, mock_session, bad_id):
        """Identifiers that could alter the URL path are refused."""
        with pytest.raises(ValueError):
            api.delete_timer(bad_id)
        mock_session.request.assert_not_called()


class TestStoreAPIPages:
    """Test cases for page operations."""

    def test_list_pages(self, api, mock_session):
        mock_session.request.return_value = make_response(DASHBOARD_RESPONSE)

        pages = api.list_pages()

        assert [p.page_id for p in pages] == [PAGE_ID, '64f1beef00']
        assert pages[0].timers[0] == TimerRecord('t1', 'Boil pasta', 540)

    def test_list_pages_without_pages_key(self, api, mock_session):
        mock_session.request.return_value = make_response({'user': 'x'})
        assert api.list_pages() == []

    def test_get_page_fetches_converters(self, api, mock_session):
        mock_session.request.side_effect = [
            make_response(DASHBOARD_RESPONSE),
            make_response(CONVERTERS_RESPONSE),
        ]

        page = api.get_page(PAGE_ID)

        assert isinstance(page, PageRecord)
        assert page.label == 'Carbonara'
        assert page.converters == [ConverterRecord('c1', 'grams', 'oz', 'g', 28.35)]
        second_call = mock_session.request.call_args_list[1]
        assert second_call.args == ('GET', f'{BASE_URL}/pages/{PAGE_ID}/unitConverters')

    def test_get_missing_page_returns_none(self, api, mock_session):
        mock_session.request.return_value = make_response(DASHBOARD_RESPONSE)

        assert api.get_page('unknown1') is None
        assert mock_session.request.call_count == 1

    def test_get_page_with_malformed_id_returns_none(self, api, mock_session):
        """An id that cannot name a page is reported as absent."""
        assert api.get_page('abc def') is None
        mock_session.request.assert_not_called()

    def test_malformed_timer_in_dashboard_raises_transport_error(self, api, mock_session):
        mock_session.request.return_value = make_response(
            {'pages': [make_page(timers=[make_timer('t1', 'Boil pasta', '5 min')])]}
        )

        with pytest.raises(TransportError, match="malformed record"):
            api.get_page(PAGE_ID)

    def test_malformed_converter_raises_transport_error(self, api, mock_session):
        bad = make_converter()
        bad['conversionFactor'] = 'abc'
        mock_session.request.side_effect = [
            make_response(DASHBOARD_RESPONSE),
            make_response({'unitConverters': [bad]}),
        ]

        with pytest.raises(TransportError, match="get_converters"):
            api.get_page(PAGE_ID)

    def test_create_page(self, api, mock_session):
        mock_session.request.return_value = make_response(
            {'page': {'_id': 'p9', 'label': 'Risotto', 'timers': []}}
        )

        page = api.create_page('Risotto')

        assert page.page_id == 'p9'
        assert mock_session.request.call_args.kwargs['json'] == {'label': 'Risotto'}


class TestStoreAPITimersAndConverters:
    """Test cases for timer and converter mutations."""

    def test_create_timer_payload(self, api, mock_session):
        mock_session.request.return_value = make_response(
            {'timers': [make_timer('t1'), make_timer('t7', 'Rest', 120)]}
        )

        record = api.create_timer(PAGE_ID, 'Rest', 120)

        assert record == TimerRecord('t7', 'Rest', 120)
        call = mock_session.request.call_args
        assert call.args == ('POST', f'{BASE_URL}/addTimer')
        assert call.kwargs['json'] == {'label': 'Rest', 'duration': 120, 'pageId': PAGE_ID}

    def test_delete_timer_url(self, api, mock_session):
        mock_session.request.return_value = make_response(None)

        api.delete_timer('t1')

        assert mock_session.request.call_args.args == ('DELETE', f'{BASE_URL}/deleteTimer/t1')

    def test_create_converter_payload(self, api, mock_session):
        mock_session.request.return_value = make_response(
            {'unitConverter': make_converter('c5')}
        )

        record = api.create_converter(PAGE_ID, 'grams', 'oz', 'g', 28.35)

        assert record.converter_id == 'c5'
        assert mock_session.request.call_args.kwargs['json'] == {
            'pageId': PAGE_ID,
            'category': 'grams',
            'fromUnit': 'oz',
            'toUnit': 'g',
            'conversionFactor': 28.35,
        }

    def test_delete_converter_url(self, api, mock_session):
        mock_session.request.return_value = make_response(None)

        api.delete_converter(PAGE_ID, 'c5')

        assert mock_session.request.call_args.args == (
            'DELETE', f'{BASE_URL}/pages/{PAGE_ID}/unitConverters/c5'
        )


class TestStoreAPILogin:
    """Test cases for login()."""

    def test_login_is_unauthenticated(self, mock_session):
        mock_auth = create_mock_auth()
        mock_session.request.return_value = make_response({'token': 'jwt', 'user': {}})

        token = StoreAPI(mock_auth).login('cook@example.com', 'secret')

        assert token == 'jwt'
        mock_auth.get_credentials.assert_not_called()
        assert mock_session.request.call_args.kwargs['headers'] == {}

    def test_login_without_token_raises(self, api, mock_session):
        mock_session.request.return_value = make_response({'user': {}})

        with pytest.raises(TransportError):
            api.login('cook@example.com', 'secret')
