from typing import Any, List

import pytest

from src.platform.exception.exceptions import TransportError
from src.platform.logging.loguru_io import Logger
from src.platform.logging.loguru_io_utils import (
    MAX_CONTENT_LENGTH,
    bind_request_id,
    mask_sensitive,
    should_mask_keyword,
    truncate_content,
)


@pytest.fixture
def captured() -> Any:
    messages: List[str] = []
    handler_id = Logger.base.add(lambda message: messages.append(str(message)), level='DEBUG')
    yield messages
    Logger.base.remove(handler_id)


@pytest.mark.unit
class TestLoguruIOUtils:
    def test_mask_sensitive_hides_password_value(self) -> None:
        masked = mask_sensitive("{'email': 'a@b.c', 'password': 'hunter2'}")

        assert 'hunter2' not in masked
        assert "'password': '********'" in masked

    def test_mask_sensitive_leaves_clean_data_untouched(self) -> None:
        data = {'num_seats': 3}

        assert mask_sensitive(data) is data

    def test_should_mask_keyword(self) -> None:
        assert should_mask_keyword('authorization', 'Bearer abc') == '********'
        assert should_mask_keyword('request_id', 'req-1') == 'req-1'

    def test_truncate_long_content(self) -> None:
        text = 'x' * (MAX_CONTENT_LENGTH + 20)

        truncated = truncate_content(text)

        assert truncated.startswith('x' * MAX_CONTENT_LENGTH)
        assert truncated.endswith('...(+20 chars)')
        assert truncate_content('short') == 'short'


@pytest.mark.unit
class TestLoggerIO:
    def test_sync_function_returns_value(self, captured: List[str]) -> None:
        @Logger.io
        def add(a: int, b: int) -> int:
            return a + b

        assert add(1, 2) == 3
        Logger.base.complete()
        assert any('return: 3' in message for message in captured)

    @pytest.mark.asyncio
    async def test_async_function_reraises_custom_error(self, captured: List[str]) -> None:
        @Logger.io
        async def fail() -> None:
            raise TransportError('Failed to submit booking request (HTTP 500)', 500)

        with pytest.raises(TransportError):
            await fail()

        await Logger.base.complete()
        assert sum('TransportError' in message for message in captured) == 1

    @pytest.mark.asyncio
    async def test_reraise_false_swallows_and_returns_none(self) -> None:
        @Logger.io(reraise=False)
        async def fail() -> int:
            raise RuntimeError('boom')

        assert await fail() is None

    def test_sensitive_kwargs_are_masked_in_log(self, captured: List[str]) -> None:
        @Logger.io
        def sign_in(*, email: str, password: str) -> bool:
            return True

        sign_in(email='rider@example.com', password='hunter2')
        Logger.base.complete()

        assert captured
        assert not any('hunter2' in message for message in captured)


@pytest.mark.unit
class TestRequestIdTag:
    def test_records_inside_block_carry_request_id(self) -> None:
        tags: List[str] = []
        handler_id = Logger.base.add(
            lambda message: tags.append(message.record['extra']['request_id']), level='INFO'
        )
        try:
            Logger.base.info('before')
            with bind_request_id('req-42'):
                Logger.base.info('polling')
            Logger.base.info('after')
            Logger.base.complete()
        finally:
            Logger.base.remove(handler_id)

        assert tags == ['-', 'req-42', '-']
