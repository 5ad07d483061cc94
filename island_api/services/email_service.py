from typing import Optional

import httpx

from island_api.config import Settings, settings
from island_api.utils.logger import mail_logger


class EmailService:
    """邮件发送服务

    通过 HTTP 邮件中继发送 HTML 邮件，接口：`POST {service_url}/v1/mail/send`。
    """

    def __init__(
        self,
        service_url: str,
        api_key: str = "",
        sender: Optional[str] = None,
        skip_sending: bool = False,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.service_url = service_url.rstrip("/")
        self.api_key = api_key
        self.sender = sender
        self.skip_sending = skip_sending
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "EmailService":
        return cls(
            service_url=config.mail_service_url,
            api_key=config.mail_api_key,
            sender=config.mail_from,
            skip_sending=config.skip_email_sending,
        )

    async def send_mail(self, to: str, subject: str, html: str) -> bool:
        """发送邮件，成功返回 True，任何失败返回 False"""
        if self.skip_sending:
            mail_logger.info(
                f"[开发模式] 跳过发送邮件 -> {to} | {subject}\n{html}")
            return True

        payload = {
            "recipient_email": to,
            "subject": subject,
            "body": html,
            "body_type": "html",
        }
        if self.sender:
            payload["sender"] = self.sender

        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.service_url}/v1/mail/send",
                    headers={
                        "Content-Type": "application/json",
                        "X-API-Key": self.api_key
                    },
                    json=payload,
                )
            except httpx.HTTPError as e:
                mail_logger.error(f"邮件服务连接失败：{to} | {e}")
                return False

        if response.status_code != 200:
            mail_logger.error(
                f"邮件发送失败：{to} | HTTP {response.status_code} | {response.text}")
            return False

        try:
            result = response.json()
        except ValueError:
            result = {}
        email_id = result.get("email_id") if isinstance(result, dict) else None
        mail_logger.info(f"邮件已发送：{to} | {subject} | id={email_id}")
        return True
