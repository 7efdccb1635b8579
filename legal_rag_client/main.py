import requests

from legal_rag_client.api import ApiService
from legal_rag_client.api.http import HttpClient
from legal_rag_client.core.config import Settings, settings as default_settings
from legal_rag_client.core.log import configure_logging
from legal_rag_client.core.storage import storage_from_settings
from legal_rag_client.services.dashboard import Dashboard, Notifier
from legal_rag_client.services.session import Navigator, Scheduler, Session
from legal_rag_client.services.store import AppStore


def create_app(
    settings: Settings | None = None,
    *,
    http_session: requests.Session | None = None,
    navigate: Navigator | None = None,
    schedule: Scheduler | None = None,
    notify: Notifier | None = None,
) -> Dashboard:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    http = HttpClient(settings.API_URL, timeout=settings.REQUEST_TIMEOUT_S, session=http_session)
    api = ApiService(http, stream_timeout=settings.STREAM_TIMEOUT_S)
    session = Session(
        http,
        storage=storage_from_settings(settings.TOKEN_STORE_PATH),
        navigate=navigate,
        schedule=schedule,
        redirect_delay_s=settings.LOGIN_REDIRECT_DELAY_S,
    )
    store = AppStore()
    session.add_logout_listener(store.reset)

    return Dashboard(api, session, store, settings=settings, notify=notify)


def bootstrap(settings: Settings | None = None, **kwargs) -> Dashboard:
    """create_app() plus session restore and the first case load."""
    app = create_app(settings, **kwargs)
    if app.session.initialize():
        app.load_cases()
    return app
