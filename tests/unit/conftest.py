import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_email_service():
    """E-mail service where every send succeeds"""
    service = MagicMock()
    service.send_order_confirmation = AsyncMock(return_value=True)
    service.send_new_order_alert = AsyncMock(return_value=True)
    service.send_order_status_update = AsyncMock(return_value=True)
    service.send_invoice = AsyncMock(return_value=True)
    return service


@pytest.fixture
def mock_pdf_service():
    service = MagicMock()
    service.generate_corporate_invoice = MagicMock(return_value=b"%PDF-1.4 test")
    return service
