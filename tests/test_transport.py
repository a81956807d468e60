import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp

from micex_iss.logger.logger import Logger
from micex_iss.platforms.micex.exceptions import NetworkError
from micex_iss.platforms.micex.transport import AiohttpTransport
from micex_iss.utils.protocols import Transport, TransportResponse

URL = "http://www.micex.ru/iss/engines.json"


def mock_session_with(status=200, reason='OK', body=b'{}'):
    mock_resp = MagicMock()
    mock_resp.status = status
    mock_resp.reason = reason
    mock_resp.read = AsyncMock(return_value=body)

    # The context manager returned by get()
    mock_get_ctx = AsyncMock()
    mock_get_ctx.__aenter__.return_value = mock_resp

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.get = MagicMock(return_value=mock_get_ctx)
    return session


class TestAiohttpTransport(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.logger = MagicMock(spec=Logger)

    def test_satisfies_transport_protocol(self):
        self.assertIsInstance(AiohttpTransport(self.logger), Transport)

    async def test_returns_status_and_body(self):
        session = mock_session_with(body=b'{"engines": {}}')
        transport = AiohttpTransport(self.logger, session=session)

        response = await transport.request(URL, {'lang': 'en'})

        self.assertEqual(response, TransportResponse(status=200, reason='OK', body=b'{"engines": {}}'))
        session.get.assert_called_once_with(URL, params={'lang': 'en'})

    async def test_non_200_is_returned_not_raised(self):
        transport = AiohttpTransport(self.logger, session=mock_session_with(status=502, reason='Bad Gateway'))

        response = await transport.request(URL)

        self.assertEqual(response.status, 502)
        self.assertEqual(response.reason, 'Bad Gateway')

    async def test_timeout_is_passed_to_aiohttp(self):
        session = mock_session_with()
        transport = AiohttpTransport(self.logger, session=session, timeout=5)

        await transport.request(URL)

        _, kwargs = session.get.call_args
        self.assertEqual(kwargs['timeout'].total, 5)

    async def test_connection_error_becomes_network_error(self):
        session = mock_session_with()
        session.get = MagicMock(side_effect=aiohttp.ClientConnectionError("Connection refused"))
        transport = AiohttpTransport(self.logger, session=session)

        with self.assertRaises(NetworkError) as ctx:
            await transport.request(URL)

        self.assertEqual(ctx.exception.url, URL)
        self.assertIsInstance(ctx.exception.__cause__, aiohttp.ClientConnectionError)
        self.logger.error.assert_called_once()

    async def test_timeout_becomes_network_error(self):
        session = mock_session_with()
        session.get = MagicMock(side_effect=asyncio.TimeoutError())
        transport = AiohttpTransport(self.logger, session=session)

        with self.assertRaises(NetworkError) as ctx:
            await transport.request(URL)

        self.assertEqual(ctx.exception.reason, 'timeout')

    async def test_owned_session_created_once_and_closed(self):
        with patch('aiohttp.ClientSession') as MockSession:
            session = mock_session_with()
            MockSession.return_value = session
            transport = AiohttpTransport(self.logger)

            await transport.request(URL)
            await transport.request(URL)
            await transport.close()

            MockSession.assert_called_once()
            self.assertEqual(session.get.call_count, 2)
            session.close.assert_called_once()
            self.assertIsNone(transport.session)

    async def test_closed_session_is_recreated(self):
        stale = mock_session_with()
        stale.closed = True
        fresh = mock_session_with()

        with patch('aiohttp.ClientSession', return_value=fresh) as MockSession:
            transport = AiohttpTransport(self.logger, session=stale)
            await transport.request(URL)

            MockSession.assert_called_once()
            fresh.get.assert_called_once()
            stale.get.assert_not_called()

    async def test_borrowed_session_is_not_closed(self):
        session = mock_session_with()
        async with AiohttpTransport(self.logger, session=session):
            pass

        session.close.assert_not_called()


class TestSerializeQuery(unittest.TestCase):
    def test_values_rendered_as_text(self):
        params = AiohttpTransport.serialize_query({
            'start': 100,
            'iss.meta': False,
            'is_trading': True,
            'price': 1.5,
            'q': 'SBER',
            'skip': None,
        })

        self.assertEqual(params, {
            'start': '100',
            'iss.meta': 'false',
            'is_trading': 'true',
            'price': '1.5',
            'q': 'SBER',
        })

    def test_empty_query(self):
        self.assertEqual(AiohttpTransport.serialize_query(None), {})


if __name__ == "__main__":
    unittest.main()
