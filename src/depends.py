from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.email_service import create_email_service
from src.adapter.services.payment_gateway import StripePaymentGateway
from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.services.email_service import EmailService
from src.app.services.payment_gateway import PaymentGateway
from src.app.services.pdf_service import PdfService

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_payment_gateway() -> PaymentGateway:
    return StripePaymentGateway(
        api_key=ApplicationConfig.STRIPE_SECRET_KEY,
        webhook_secret=ApplicationConfig.STRIPE_WEBHOOK_SECRET,
    )


def get_email_service() -> EmailService:
    return create_email_service(
        api_url=ApplicationConfig.EMAIL_API_URL,
        api_key=ApplicationConfig.EMAIL_API_KEY,
        sender=ApplicationConfig.EMAIL_SENDER,
        admin_email=ApplicationConfig.ADMIN_EMAIL,
        site_url=ApplicationConfig.SITE_URL,
    )


def get_pdf_service() -> PdfService:
    return ReportLabPdfService()
