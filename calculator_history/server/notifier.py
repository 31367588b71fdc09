"""Push notifications sent in the background, detached from the request that triggered them."""
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
import threading
from typing import Optional

import firebase_admin
from firebase_admin import credentials, messaging
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from calculator_history.common.config import FirebaseCredentials
from calculator_history.common.errors import NotificationFailure
from calculator_history.common.logger import logger

NOTIFICATION_TITLE = "Calculation Complete"


def _format_number(value: float) -> str:
    # Integral floats are shown without a trailing ".0"
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def calculation_summary(num1: float, num2: float, operation: str, result: float) -> str:
    """Body of the notification sent after a calculation."""
    return (
        f"The result of {_format_number(num1)} {operation} {_format_number(num2)} "
        f"is {_format_number(result)}"
    )


class Notifier(ABC):
    """Notification gateway contract."""

    @abstractmethod
    def send(self, device_token: str, title: str, body: str) -> str:
        """
        Deliver one notification to a device.

        :return: Message id assigned by the gateway
        :rtype: str
        """


class FirebaseNotifier(BaseModel, Notifier):
    """
    Notification gateway backed by Firebase Cloud Messaging.

    The Firebase app is created on first use, so that a misconfigured key only affects notifications.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    firebase_credentials: FirebaseCredentials = Field(..., description="Service account used to authenticate")
    app_name: str = Field(default="calculator-history", description="Name of the firebase_admin app")

    _app: Optional[firebase_admin.App] = PrivateAttr(default=None)
    _app_lock: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def _get_app(self) -> firebase_admin.App:
        """
        Return the Firebase app of this notifier, initialising it once.

        :return: Initialised app
        :rtype: firebase_admin.App
        """
        with self._app_lock:
            if self._app is None:
                try:
                    # Reuse the app already created by another notifier of this process
                    self._app = firebase_admin.get_app(self.app_name)
                except ValueError:
                    certificate = credentials.Certificate(self.firebase_credentials.as_certificate())
                    self._app = firebase_admin.initialize_app(certificate, name=self.app_name)
                    logger.info(f"🔔 Firebase initialized for project {self.firebase_credentials.project_id}")
            return self._app

    def send(self, device_token: str, title: str, body: str) -> str:
        message = messaging.Message(
            notification=messaging.Notification(title=title, body=body),
            token=device_token,
        )
        return messaging.send(message, app=self._get_app())


class NotificationWorker(BaseModel):
    """
    Worker responsible for delivering a single notification.

    Lifecycle:
        - Created by the dispatcher for one notification
        - Sends it through the notifier
        - Logs the outcome; a failure never leaves the worker
    """

    # Make the Pydantic instance immutable (read-only) for safety
    # Allow arbitrary types like Notifier implementations
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    notifier: Notifier = Field(..., description="Gateway used to deliver the notification")
    device_token: str = Field(..., description="Target device token")
    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")

    @field_validator("device_token")
    def device_token_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the device token is not empty."""
        if not v.strip():
            raise ValueError("Device token cannot be empty")
        return v

    def run(self) -> Optional[str]:
        """
        Send the notification.

        :return: Message id on success, None on failure
        :rtype: Optional[str]
        """
        try:
            message_id = self.notifier.send(self.device_token, self.title, self.body)
        except Exception as exc:
            failure = NotificationFailure(f"Error sending notification: {exc}")
            logger.error(f"🔔❌ {failure.message}")
            return None

        logger.info(f"🔔✅ Notification sent successfully: {message_id}")
        return message_id


class NotificationDispatcher(BaseModel):
    """Runs notification workers on a thread pool so that callers never wait for delivery."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    notifier: Notifier = Field(..., description="Gateway used by every worker")
    max_workers: int = Field(default=4, ge=1, description="Size of the thread pool")

    _executor: ThreadPoolExecutor = PrivateAttr()

    def model_post_init(self, __context) -> None:
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="notifier")

    def dispatch(self, device_token: str, title: str, body: str) -> Future:
        """
        Schedule a notification and return immediately.

        :param str device_token: Target device token
        :param str title: Notification title
        :param str body: Notification body

        :return: Future of the worker, resolving to the message id or None
        :rtype: concurrent.futures.Future
        """
        worker = NotificationWorker(notifier=self.notifier, device_token=device_token, title=title, body=body)
        return self._executor.submit(worker.run)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting notifications, optionally waiting for pending ones."""
        self._executor.shutdown(wait=wait)
