import sys
import logging
from dataclasses import dataclass
from typing import Any, Optional

from Pianoacademy import paths
from Pianoacademy.config import DataConfig
from Pianoacademy.data import create_tables
from Pianoacademy.repositories import Repositories, build_repositories
from Pianoacademy.stores import Stores, build_stores
from Pianoacademy.stores.auth_store import AuthStore
from Pianoacademy.stores.effects import SideEffectQueue

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_logging():
    root = logging.getLogger()
    if root.handlers:
        return  # respect existing setup
    paths.APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(paths.LOG_PATH, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.setLevel(logging.INFO)
    root.addHandler(file_handler)

    stream = getattr(sys, "__stdout__", None) or sys.stdout
    if stream is not None:
        console_handler = logging.StreamHandler(stream)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)


@dataclass
class AcademyApp:
    config: DataConfig
    repositories: Repositories
    stores: Stores
    effects: SideEffectQueue
    auth: Optional[Any] = None
    push: Optional[Any] = None


def initialize_app(config=None, firestore_client=None, api_session=None, dataset=None) -> AcademyApp:
    """Wire storage, backends, repositories and stores for the configured data mode."""
    ensure_logging()
    config = config or DataConfig.from_env()
    create_tables()

    effects = SideEffectQueue()
    auth_store = AuthStore()

    api_client = None
    remote = None
    auth_service = None
    push = None
    if config.is_api_mode():
        from Pianoacademy.services.api_client import ApiClient
        api_client = ApiClient(config, session=api_session)
    elif config.is_firebase_mode():
        from google.cloud import firestore
        from Pianoacademy.services.auth_service import AuthService
        from Pianoacademy.services.firestore_service import RemoteDataService
        from Pianoacademy.services.push_service import PushNotifier
        remote = RemoteDataService(firestore_client or firestore.Client(project=config.firebase_project_id))
        auth_service = AuthService(config, remote)
        push = PushNotifier(config, remote)

    repositories = build_repositories(
        config,
        dataset=dataset,
        api_client=api_client,
        remote=remote,
        current_user=auth_store.current_user_id,
    )
    stores = build_stores(repositories, effects, auth=auth_store)
    if auth_service is not None:
        auth_store.bind_auth(auth_service)

    logger.info("App initialized (%s mode, data dir %s)", config.mode.value, paths.APP_DATA_DIR)
    return AcademyApp(
        config=config,
        repositories=repositories,
        stores=stores,
        effects=effects,
        auth=auth_service,
        push=push,
    )
