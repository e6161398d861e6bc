"""Command-line interface for storage-client.

Commands:
    - buckets / bucket-info: list buckets or show one bucket
    - create-bucket / update-bucket / empty-bucket / delete-bucket
    - ls / info: list objects under a prefix or show one object
    - upload / download: transfer files (both streamed)
    - mv / cp / rm: relocate or remove objects
    - sign: create a signed download URL

Connection options default to the STORAGE_CLIENT_URL, STORAGE_CLIENT_API_KEY
and STORAGE_CLIENT_ACCESS_TOKEN environment variables.
"""

from typing import Annotated, Optional

import typer

from . import __version__
from .client import ClientConfig
from .core.config import settings
from .schemas import Bucket, ObjectOptions, SearchOptions, SortBy, StorageObject
from .storage import Storage

app = typer.Typer(
    name="storage-client",
    help="Manage buckets and objects in a storage API.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"storage-client {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    url: Annotated[
        Optional[str], typer.Option("--url", help="Project base URL")
    ] = None,
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", help="API key")
    ] = None,
    access_token: Annotated[
        Optional[str],
        typer.Option("--access-token", help="Bearer token, defaults to the API key"),
    ] = None,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Storage client: bucket and object operations against a storage API.
    """
    ctx.obj = {
        "url": url or settings.url,
        "api_key": api_key or settings.api_key,
        "access_token": access_token or settings.access_token,
    }


def _build_storage(ctx: typer.Context) -> Storage:
    """Create a Storage facade from the connection options."""
    options = ctx.obj or {}
    if not options.get("url") or not options.get("api_key"):
        raise ValueError("--url and --api-key (or their environment variables) are required")

    config = ClientConfig(
        base_url=options["url"],
        api_key=options["api_key"],
        access_token=options.get("access_token"),
        timeout=settings.timeout,
    )
    return Storage.from_config(config)


def _format_bucket(bucket: Bucket) -> str:
    visibility = "public" if bucket.public else "private"
    limit = f"{bucket.file_size_limit:,} bytes" if bucket.file_size_limit else "none"
    mime = ", ".join(bucket.allowed_mime_types or []) or "any"
    return f"{bucket.id} ({visibility}) name={bucket.name} limit={limit} types={mime}"


def _format_object(obj: StorageObject) -> str:
    size = f"{obj.size:,}" if obj.size is not None else "-"
    return f"{obj.path}\t{size}\t{obj.mime_type or '-'}\t{obj.last_modified or '-'}"


@app.command("buckets")
def buckets_cmd(ctx: typer.Context) -> None:
    """List all buckets."""
    try:
        with _build_storage(ctx) as storage:
            buckets = storage.list_buckets()

        if buckets:
            typer.echo(f"Found {len(buckets)} buckets:")
            for bucket in buckets:
                typer.echo(f"  {_format_bucket(bucket)}")
        else:
            typer.echo("No buckets found.")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("bucket-info")
def bucket_info_cmd(
    ctx: typer.Context,
    bucket_id: Annotated[str, typer.Argument(help="Bucket id")],
) -> None:
    """Show a single bucket."""
    try:
        with _build_storage(ctx) as storage:
            bucket = storage.retrieve_bucket_info(bucket_id)
        typer.echo(_format_bucket(bucket))

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("create-bucket")
def create_bucket_cmd(
    ctx: typer.Context,
    bucket_id: Annotated[str, typer.Argument(help="Bucket id")],
    name: Annotated[
        Optional[str], typer.Option("--name", help="Display name, defaults to the id")
    ] = None,
    public: Annotated[
        bool, typer.Option("--public/--private", help="Bucket visibility")
    ] = False,
    file_size_limit: Annotated[
        Optional[int],
        typer.Option("--file-size-limit", help="Maximum object size in bytes"),
    ] = None,
    mime_types: Annotated[
        Optional[list[str]],
        typer.Option("--mime-type", help="Allowed MIME type (repeatable)"),
    ] = None,
) -> None:
    """
    Create a bucket.

    Examples:
        storage-client create-bucket avatars --public --mime-type image/png
    """
    attrs = {
        "id": bucket_id,
        "name": name,
        "public": public,
        "file_size_limit": file_size_limit,
        "allowed_mime_types": mime_types or None,
    }
    try:
        with _build_storage(ctx) as storage:
            bucket = storage.create_bucket(attrs)
        typer.echo(f"Created: {_format_bucket(bucket)}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("update-bucket")
def update_bucket_cmd(
    ctx: typer.Context,
    bucket_id: Annotated[str, typer.Argument(help="Bucket id")],
    public: Annotated[
        Optional[bool], typer.Option("--public/--private", help="Bucket visibility")
    ] = None,
    file_size_limit: Annotated[
        Optional[int],
        typer.Option("--file-size-limit", help="Maximum object size in bytes"),
    ] = None,
    mime_types: Annotated[
        Optional[list[str]],
        typer.Option("--mime-type", help="Allowed MIME type (repeatable)"),
    ] = None,
) -> None:
    """Update a bucket's visibility, size limit or allowed MIME types."""
    attrs: dict = {}
    if public is not None:
        attrs["public"] = public
    if file_size_limit is not None:
        attrs["file_size_limit"] = file_size_limit
    if mime_types:
        attrs["allowed_mime_types"] = mime_types

    try:
        with _build_storage(ctx) as storage:
            bucket = storage.retrieve_bucket_info(bucket_id)
            bucket = storage.update_bucket(bucket, attrs)
        typer.echo(f"Updated: {_format_bucket(bucket)}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("empty-bucket")
def empty_bucket_cmd(
    ctx: typer.Context,
    bucket_id: Annotated[str, typer.Argument(help="Bucket id")],
) -> None:
    """Delete every object in a bucket."""
    try:
        with _build_storage(ctx) as storage:
            result = storage.empty_bucket(bucket_id)
        typer.echo(f"Bucket {bucket_id} {result.value}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("delete-bucket")
def delete_bucket_cmd(
    ctx: typer.Context,
    bucket_id: Annotated[str, typer.Argument(help="Bucket id")],
) -> None:
    """Delete a bucket and all of its objects."""
    try:
        with _build_storage(ctx) as storage:
            result = storage.delete_bucket(bucket_id)
        typer.echo(f"Bucket {bucket_id} {result.value}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("ls")
def list_objects_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    prefix: Annotated[str, typer.Argument(help="Path prefix")] = "",
    limit: Annotated[
        Optional[int], typer.Option("--limit", help="Maximum number of objects")
    ] = None,
    offset: Annotated[
        Optional[int], typer.Option("--offset", help="Number of objects to skip")
    ] = None,
    sort_column: Annotated[
        str, typer.Option("--sort", help="Column to sort by")
    ] = "created_at",
    ascending: Annotated[
        bool, typer.Option("--asc", help="Sort ascending instead of descending")
    ] = False,
) -> None:
    """List objects under a prefix."""
    options = SearchOptions(
        limit=limit,
        offset=offset,
        sort_by=SortBy(column=sort_column, order="asc" if ascending else "desc"),
    )
    try:
        with _build_storage(ctx) as storage:
            objects = storage.list_objects(bucket, prefix, options)

        if objects:
            typer.echo(f"Found {len(objects)} objects:")
            for obj in objects:
                typer.echo(f"  {_format_object(obj)}")
        else:
            typer.echo("No objects found.")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("info")
def object_info_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    path: Annotated[str, typer.Argument(help="Object path")],
) -> None:
    """Show metadata for one object."""
    try:
        with _build_storage(ctx) as storage:
            obj = storage.retrieve_object_info(bucket, path)
        typer.echo(_format_object(obj))

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("upload")
def upload_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    path: Annotated[str, typer.Argument(help="Destination path in the bucket")],
    file: Annotated[str, typer.Argument(help="Local file to upload")],
    content_type: Annotated[
        str, typer.Option("--content-type", help="Content-Type of the object")
    ] = "text/plain;charset=UTF-8",
    cache_control: Annotated[
        int, typer.Option("--cache-control", help="Cache max-age in seconds")
    ] = 3600,
    upsert: Annotated[
        bool, typer.Option("--upsert", help="Overwrite an existing object")
    ] = False,
) -> None:
    """Upload a local file."""
    options = ObjectOptions(
        cache_control=cache_control, content_type=content_type, upsert=upsert
    )
    try:
        with _build_storage(ctx) as storage:
            obj = storage.upload_object(bucket, path, file, options)
        typer.echo(f"Uploaded {file} to {bucket}/{obj.path}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("download")
def download_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    path: Annotated[str, typer.Argument(help="Object path")],
    destination: Annotated[str, typer.Argument(help="Local file to write")],
) -> None:
    """Download an object to a local file."""
    try:
        with _build_storage(ctx) as storage:
            written = storage.save_object_stream(destination, bucket, path)
        typer.echo(f"Saved {bucket}/{path} to {destination} ({written:,} bytes)")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("mv")
def move_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    source: Annotated[str, typer.Argument(help="Current object path")],
    destination: Annotated[str, typer.Argument(help="New object path")],
) -> None:
    """Move an object within a bucket."""
    try:
        with _build_storage(ctx) as storage:
            result = storage.move_object(bucket, source, destination)
        typer.echo(f"{source} {result.value} to {destination}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("cp")
def copy_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    source: Annotated[str, typer.Argument(help="Object path to copy")],
    destination: Annotated[str, typer.Argument(help="Path of the copy")],
) -> None:
    """Copy an object within a bucket."""
    try:
        with _build_storage(ctx) as storage:
            result = storage.copy_object(bucket, source, destination)
        typer.echo(f"{source} {result.value} to {destination}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("rm")
def remove_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    paths: Annotated[list[str], typer.Argument(help="Object paths to remove")],
) -> None:
    """
    Remove objects.

    The server does not report which paths existed, so success only means
    the request was accepted.
    """
    try:
        with _build_storage(ctx) as storage:
            storage.remove_objects(bucket, paths)
        typer.echo(f"Removal requested for {len(paths)} objects in {bucket}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("sign")
def sign_cmd(
    ctx: typer.Context,
    bucket: Annotated[str, typer.Argument(help="Bucket name")],
    path: Annotated[str, typer.Argument(help="Object path")],
    expires_in: Annotated[
        int, typer.Option("--expires-in", help="URL lifetime in seconds")
    ] = 3600,
) -> None:
    """Create a signed download URL."""
    try:
        with _build_storage(ctx) as storage:
            url = storage.create_signed_url(bucket, path, expires_in)
        typer.echo(url)

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
