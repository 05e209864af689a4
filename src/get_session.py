"""Telegram user session for roomlink: client factory and interactive login.

Run once (or let ``app.py run`` call ``authorize``) to create the local
.session file. Supports QR login and phone code login, with 2FA.
Credentials come from the environment (.env is honoured).
"""

import asyncio
import logging
import os
from getpass import getpass

import qrcode
from dotenv import load_dotenv
from telethon import TelegramClient, errors

LOGGER = logging.getLogger(__name__)

QR_TIMEOUT_SECONDS = 120
DEFAULT_SESSION_NAME = "roomlink"


def build_client() -> TelegramClient:
    """Create the relay's Telethon client from API_ID/API_HASH/SESSION_NAME."""

    load_dotenv()
    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    session_name = os.getenv("SESSION_NAME") or DEFAULT_SESSION_NAME
    LOGGER.info("Using Telegram session %s", session_name)
    return TelegramClient(session_name, int(api_id), api_hash)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _resolve_2fa_password() -> str:
    return os.getenv("2FA") or getpass("2FA password: ")


async def _authorize_with_qr(client: TelegramClient) -> None:
    qr_login = await client.qr_login()
    print("Scan this code in Telegram: Settings > Devices > Link Desktop Device")
    _print_qr(qr_login.url)
    await qr_login.wait(timeout=QR_TIMEOUT_SECONDS)


async def _authorize_with_phone(client: TelegramClient) -> None:
    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    await client.sign_in(phone=phone, code=code)


def _pick_login_method() -> str:
    method = (os.getenv("LOGIN_METHOD") or "").strip().lower()
    if method in {"qr", "phone"}:
        return method

    choices = {"1": "qr", "2": "phone"}
    while True:
        print("\nLogin methods:\n[1] QR code\n[2] Phone code\n[3] Exit\n")
        choice = input("roomlink > ").strip()
        if choice == "3":
            raise SystemExit(0)
        if choice in choices:
            return choices[choice]
        print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient) -> None:
    """Log the client in unless the session is already authorized."""

    if await client.is_user_authorized():
        return

    load_dotenv()
    try:
        if _pick_login_method() == "phone":
            await _authorize_with_phone(client)
        else:
            await _authorize_with_qr(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_resolve_2fa_password())


async def main() -> None:
    client = build_client()
    await client.connect()

    await authorize(client)

    me = await client.get_me()
    LOGGER.info("Logged in as: %s", me.first_name)

    await client.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
