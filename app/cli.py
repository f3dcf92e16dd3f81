"""Command line interface for the Image Studio API."""
import argparse
import asyncio
import json
import logging
import os
import pathlib
import sys

from app.client import ClientError, ImageStudioClient

DEFAULT_BASE_URL = os.environ.get("IMAGE_STUDIO_URL", "http://localhost:8000")
DEFAULT_SESSION_FILE = pathlib.Path(
    os.environ.get("IMAGE_STUDIO_SESSION", pathlib.Path.home() / ".image-studio" / "session.json")
)

logger = logging.getLogger(__name__)


def load_token(path: pathlib.Path) -> str | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text()).get("access_token")
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", path, e)
        return None


def save_token(path: pathlib.Path, token: str | None) -> None:
    if token is None:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"access_token": token}))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="image-studio", description=__doc__)
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    parser.add_argument(
        "--session-file",
        type=pathlib.Path,
        default=DEFAULT_SESSION_FILE,
        help="Where the access token is kept between commands",
    )
    parser.add_argument("--log-level", default="WARNING")

    commands = parser.add_subparsers(dest="command", required=True)

    signup = commands.add_parser("signup", help="Create an account")
    signup.add_argument("email")
    signup.add_argument("password")
    signup.add_argument("--full-name")

    login = commands.add_parser("login", help="Sign in")
    login.add_argument("email")
    login.add_argument("password")

    commands.add_parser("logout", help="Sign out")
    commands.add_parser("whoami", help="Show the current session")

    generate = commands.add_parser("generate", help="Generate an image")
    generate.add_argument("prompt")
    generate.add_argument("--edit", metavar="IMAGE_ID", help="Edit one of your images")

    commands.add_parser("list", help="List your images, newest first")

    delete = commands.add_parser("delete", help="Delete one of your images")
    delete.add_argument("image_id")

    download = commands.add_parser("download", help="Download one of your images")
    download.add_argument("image_id")
    download.add_argument("-o", "--output", type=pathlib.Path)

    return parser


async def run(args: argparse.Namespace) -> int:
    async with ImageStudioClient(args.base_url, token=load_token(args.session_file)) as client:
        if args.command == "signup":
            await client.sign_up(args.email, args.password, args.full_name)
            print("Account created. You can sign in now.")
        elif args.command == "login":
            save_token(args.session_file, await client.sign_in(args.email, args.password))
            print("Signed in.")
        elif args.command == "logout":
            await client.sign_out()
            save_token(args.session_file, None)
            print("Signed out.")
        elif args.command == "whoami":
            session = await client.current_session()
            if session is None:
                print("Not signed in.")
                return 1
            print(f"{session['email']} ({session['id']})")
        elif args.command == "generate":
            record = await client.generate(args.prompt, edit_image=args.edit)
            print(f"Created image {record['id']}")
            if record.get("text_content"):
                print(record["text_content"])
        elif args.command == "list":
            for image in await client.list_images():
                print(f"{image['id']}  {image['created_at']}  {image['prompt']}")
        elif args.command == "delete":
            await client.delete_image(args.image_id)
            print("Image deleted.")
        elif args.command == "download":
            image = await client.download_image(args.image_id)
            output = args.output or pathlib.Path(pathlib.Path(image.filename).name)
            output.write_bytes(image.content)
            print(f"Saved {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        return asyncio.run(run(args))
    except ClientError as e:
        print(f"{e.notification.title}: {e.notification.description}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
