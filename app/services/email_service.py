"""
メール送信サービス
Resend APIを使用してメールを送信する
"""
import logging
from typing import Optional
import resend

from app.config import settings

logger = logging.getLogger(__name__)

# Resend API設定
resend.api_key = settings.RESEND_API_KEY or None


class EmailService:
    """メール送信サービスクラス"""

    def __init__(self):
        self.from_email = settings.RESEND_FROM_EMAIL
        self.enabled = settings.EMAIL_ENABLED

        if self.enabled and not resend.api_key:
            logger.warning("RESEND_API_KEY が設定されていません")

    def send_email(
        self,
        to: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> dict:
        """メールを送信する（EMAIL_ENABLED=False の場合は送信しない）"""
        if not self.enabled:
            logger.info(f"メール送信スキップ（無効）: to={to}, subject={subject}")
            return {"success": False, "error": "email disabled"}

        try:
            params = {
                "from": self.from_email,
                "to": [to],
                "subject": subject,
                "html": html_content,
            }

            if text_content:
                params["text"] = text_content

            response = resend.Emails.send(params)

            logger.info(f"メール送信成功: to={to}, subject={subject}")
            return {"success": True, "id": response.get("id")}

        except Exception as e:
            logger.error(f"メール送信エラー: {str(e)}")
            return {"success": False, "error": str(e)}

    def send_verification_email(self, to: str, username: str, token: str) -> dict:
        """メールアドレス確認メールを送信"""
        verify_url = f"{settings.FRONTEND_URL}/verify?token={token}"
        subject = "Verifica tu correo en FiguraCollect"

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="UTF-8">
        </head>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #7c3aed;">¡Hola {username}!</h1>
            <p>Gracias por registrarte en FiguraCollect. Confirma tu correo para activar tu cuenta.</p>
            <p style="margin: 30px 0;">
                <a href="{verify_url}"
                   style="display: inline-block; background: #7c3aed; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px;">
                    Verificar correo
                </a>
            </p>
            <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
            <p style="color: #999; font-size: 12px;">
                Si no creaste esta cuenta, ignora este mensaje.
            </p>
        </body>
        </html>
        """

        return self.send_email(to=to, subject=subject, html_content=html_content)

    def send_figure_released_email(
        self,
        to: str,
        figure_name: str,
        figure_url: str,
        image_url: Optional[str] = None
    ) -> dict:
        """発売通知メールを送信"""
        subject = f"¡{figure_name[:40]} ya está disponible!"
        image_tag = f'<img src="{image_url}" alt="{figure_name}" style="max-width: 200px;">' if image_url else ""

        html_content = f"""
        <!DOCTYPE html>
        <html>
        <head>
            <meta charset="UTF-8">
        </head>
        <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h1 style="color: #7c3aed;">🎉 Nuevo lanzamiento</h1>
            {image_tag}
            <h2>{figure_name}</h2>
            <p>Una figura de tu colección ya fue lanzada.</p>
            <a href="{figure_url}" style="display: inline-block; background: #7c3aed; color: white; padding: 12px 24px; text-decoration: none; border-radius: 4px;">
                Ver figura
            </a>
        </body>
        </html>
        """

        return self.send_email(to=to, subject=subject, html_content=html_content)


# シングルトンインスタンス
email_service = EmailService()
