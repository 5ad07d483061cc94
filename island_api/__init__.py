"""AI尤里岛 账户与邮箱验证码服务"""
__version__ = "1.0.0"
