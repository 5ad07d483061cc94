"""验证码邮件模板"""
from typing import Optional, Tuple

from island_api.config import settings
from island_api.schemas.verification import VerificationPurpose

_BASE_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body {{ font-family: Arial, sans-serif; background-color: #f5f5f5; }}
        .container {{ max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 20px; border: 1px solid #e5e7eb; border-radius: 8px; }}
        .header {{ text-align: center; margin-bottom: 20px; }}
        .header h1 {{ color: #2A5674; margin-bottom: 5px; }}
        .header p {{ color: #6b7280; margin-top: 0; }}
        .content {{ padding: 20px; background-color: #f9fafb; border-radius: 8px; color: #4b5563; line-height: 1.6; }}
        .code-box {{ background-color: #2A5674; color: #ffffff; font-size: 24px; font-weight: bold; text-align: center; padding: 15px; border-radius: 6px; letter-spacing: 5px; margin: 20px 0; }}
        .footer {{ text-align: center; color: #6b7280; font-size: 12px; margin-top: 20px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{site_name}</h1>
            <p>您的AI学习社区</p>
        </div>
        <div class="content">
            <h2>{title}</h2>
            <p>{intro}</p>
            <div class="code-box">{code}</div>
            <p>验证码有效期为{ttl_minutes}分钟，请勿将验证码分享给他人。</p>
        </div>
        <div class="footer">
            <p>{footer}</p>
        </div>
    </div>
</body>
</html>
""".strip()

_CONTENT = {
    VerificationPurpose.registration: {
        "subject": "{site_name} - 注册验证码",
        "title": "验证您的邮箱",
        "intro": "感谢您注册{site_name}。请使用以下验证码完成注册流程：",
        "footer": "如果您没有请求此验证码，请忽略此邮件。",
    },
    VerificationPurpose.password_reset: {
        "subject": "{site_name} - 密码重置验证码",
        "title": "重置您的密码",
        "intro": "您最近请求重置密码。请使用以下验证码完成密码重置流程：",
        "footer": "如果您没有请求重置密码，请忽略此邮件并考虑修改您的密码。",
    },
}


def render_verification_email(
    code: str,
    purpose: VerificationPurpose,
    ttl_minutes: int = 10,
    site_name: Optional[str] = None,
) -> Tuple[str, str]:
    """根据用途生成验证码邮件的主题和HTML正文"""
    site_name = site_name or settings.site_name
    content = _CONTENT[VerificationPurpose(purpose)]

    subject = content["subject"].format(site_name=site_name)
    body = _BASE_TEMPLATE.format(
        site_name=site_name,
        title=content["title"],
        intro=content["intro"].format(site_name=site_name),
        code=code,
        ttl_minutes=ttl_minutes,
        footer=content["footer"],
    )
    return subject, body
