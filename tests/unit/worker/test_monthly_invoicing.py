"""Unit tests for MonthlyInvoicingWorker

Tests cover:
- Previous month calculation
- Worker initialization with configuration
- run_once running invoicing then the overdue sweep
- Step failures reported without stopping the run
- Shutdown and cleanup
"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Error, Return
from src.app.use_cases.invoices import MarkOverdueResultDTO, MonthlyInvoicingResultDTO
from src.worker.monthly_invoicing import MonthlyInvoicingWorker, previous_month


@pytest.fixture
def mock_session_factory():
    """Session factory yielding a mock async session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.fixture
def worker(mock_session_factory, mock_email_service, mock_pdf_service):
    return MonthlyInvoicingWorker(
        email_service=mock_email_service,
        pdf_service=mock_pdf_service,
        session_factory=mock_session_factory,
    )


@pytest.fixture
def invoicing_result():
    return MonthlyInvoicingResultDTO(
        year=2024,
        month=1,
        created=["BFC-2024-01-0001", "BFC-2024-01-0002"],
        sent=["BFC-2024-01-0001"],
        email_failed=["BFC-2024-01-0002"],
    )


class TestPreviousMonth:
    def test_mid_year(self):
        assert previous_month(datetime(2024, 6, 3)) == (2024, 5)

    def test_january_rolls_back_a_year(self):
        assert previous_month(datetime(2024, 1, 1)) == (2023, 12)


class TestWorkerInit:
    @patch("src.worker.monthly_invoicing.ApplicationConfig")
    @patch("src.worker.monthly_invoicing.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        """
        Given: No session factory provided
        When: Worker is initialized
        Then: An engine is created from ApplicationConfig.DB_URI
        """
        # Arrange
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"
        mock_create_engine.return_value = MagicMock()

        # Act
        worker = MonthlyInvoicingWorker(email_service=MagicMock(), pdf_service=MagicMock())

        # Assert
        assert worker.engine is mock_create_engine.return_value
        assert mock_create_engine.call_args[0][0] == "sqlite+aiosqlite:///./default.db"

    def test_uses_given_session_factory(self, worker, mock_session_factory):
        assert worker.engine is None
        assert worker.async_session_factory is mock_session_factory


@pytest.mark.asyncio
class TestRunOnce:
    @patch("src.worker.monthly_invoicing.MarkOverdueInvoices")
    @patch("src.worker.monthly_invoicing.GenerateMonthlyInvoices")
    async def test_defaults_to_previous_month(
        self, mock_generate_cls, mock_overdue_cls, worker, invoicing_result
    ):
        """
        Given: No billing month
        When: run_once is called on February 1st
        Then: January is invoiced and the overdue sweep runs with the same instant
        """
        # Arrange
        now = datetime(2024, 2, 1, 6, 0)
        mock_generate_cls.return_value.execute = AsyncMock(return_value=Return.ok(invoicing_result))
        mock_overdue_cls.return_value.execute = AsyncMock(
            return_value=Return.ok(MarkOverdueResultDTO(marked=["BFC-2023-12-0003"]))
        )

        # Act
        run = await worker.run_once(now=now)

        # Assert
        command = mock_generate_cls.return_value.execute.call_args[0][0]
        assert (command.year, command.month) == (2024, 1)
        mock_overdue_cls.return_value.execute.assert_awaited_once_with(now)
        assert run.invoicing.sent == ["BFC-2024-01-0001"]
        assert run.overdue.marked == ["BFC-2023-12-0003"]
        assert run.errors == []
        assert run.execution_time_ms >= 0

    @patch("src.worker.monthly_invoicing.MarkOverdueInvoices")
    @patch("src.worker.monthly_invoicing.GenerateMonthlyInvoices")
    async def test_explicit_month(self, mock_generate_cls, mock_overdue_cls, worker, invoicing_result):
        mock_generate_cls.return_value.execute = AsyncMock(return_value=Return.ok(invoicing_result))
        mock_overdue_cls.return_value.execute = AsyncMock(return_value=Return.ok(MarkOverdueResultDTO()))

        await worker.run_once(year=2023, month=11, now=datetime(2024, 2, 1))

        command = mock_generate_cls.return_value.execute.call_args[0][0]
        assert (command.year, command.month) == (2023, 11)

    @patch("src.worker.monthly_invoicing.MarkOverdueInvoices")
    @patch("src.worker.monthly_invoicing.GenerateMonthlyInvoices")
    async def test_invoicing_failure_still_runs_sweep(
        self, mock_generate_cls, mock_overdue_cls, worker
    ):
        """
        Given: Corporate accounts cannot be loaded
        When: run_once is called
        Then: The error is reported and overdue invoices are still marked
        """
        # Arrange
        mock_generate_cls.return_value.execute = AsyncMock(
            return_value=Return.err(
                Error(code="GENERATE_INVOICES_FAILED", message="Failed to load corporate accounts")
            )
        )
        mock_overdue_cls.return_value.execute = AsyncMock(
            return_value=Return.ok(MarkOverdueResultDTO(marked=["BFC-2024-01-0001"]))
        )

        # Act
        run = await worker.run_once(year=2024, month=1)

        # Assert
        assert run.invoicing is None
        assert run.errors == ["GENERATE_INVOICES_FAILED"]
        assert run.overdue.marked == ["BFC-2024-01-0001"]

    @patch("src.worker.monthly_invoicing.MarkOverdueInvoices")
    @patch("src.worker.monthly_invoicing.GenerateMonthlyInvoices")
    async def test_each_step_gets_its_own_session(
        self, mock_generate_cls, mock_overdue_cls, worker, mock_session_factory, invoicing_result
    ):
        mock_generate_cls.return_value.execute = AsyncMock(return_value=Return.ok(invoicing_result))
        mock_overdue_cls.return_value.execute = AsyncMock(return_value=Return.ok(MarkOverdueResultDTO()))

        await worker.run_once(year=2024, month=1)

        assert mock_session_factory.call_count == 2


@pytest.mark.asyncio
class TestShutdown:
    @patch("src.worker.monthly_invoicing.create_async_engine")
    async def test_disposes_engine(self, mock_create_engine):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        mock_create_engine.return_value = engine
        worker = MonthlyInvoicingWorker(email_service=MagicMock(), pdf_service=MagicMock())

        await worker.shutdown()

        engine.dispose.assert_awaited_once()

    async def test_no_engine_to_dispose(self, worker):
        await worker.shutdown()
