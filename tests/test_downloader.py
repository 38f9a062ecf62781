"""
Tests for the HTTP downloader against a local aiohttp server.
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from ytrs_cli.exceptions import DownloadError
from ytrs_cli.media.downloader import Downloader

PAYLOAD = b"x" * 600_000


async def _serve(handler_map, scenario):
    app = web.Application()
    for path, handler in handler_map.items():
        app.router.add_get(path, handler)
    server = TestServer(app)
    await server.start_server()
    try:
        return await scenario(server)
    finally:
        await server.close()


async def _ok(request):
    return web.Response(body=PAYLOAD)


async def _missing(request):
    return web.Response(status=404)


async def _truncated(request):
    response = web.StreamResponse(headers={"Content-Length": str(len(PAYLOAD))})
    await response.prepare(request)
    await response.write(PAYLOAD[:1000])
    # Drop the connection before the advertised length was sent.
    request.transport.close()
    return response


def test_download_writes_complete_file(tmp_path):
    destination = tmp_path / "yt-dlp"

    async def scenario(server):
        downloader = Downloader()
        try:
            return await downloader.download_file(
                str(server.make_url("/bin")), destination
            )
        finally:
            await downloader.close()

    result = asyncio.run(_serve({"/bin": _ok}, scenario))

    assert result == destination
    assert destination.read_bytes() == PAYLOAD
    assert list(tmp_path.iterdir()) == [destination]


def test_http_error_raises_and_leaves_no_partial_file(tmp_path):
    destination = tmp_path / "ffmpeg.tar.xz"

    async def scenario(server):
        downloader = Downloader()
        try:
            await downloader.download_file(str(server.make_url("/nope")), destination)
        finally:
            await downloader.close()

    with pytest.raises(DownloadError):
        asyncio.run(_serve({"/nope": _missing}, scenario))

    assert list(tmp_path.iterdir()) == []


def test_interrupted_transfer_leaves_no_partial_file(tmp_path):
    destination = tmp_path / "ffmpeg.tar.xz"

    async def scenario(server):
        downloader = Downloader()
        try:
            await downloader.download_file(str(server.make_url("/cut")), destination)
        finally:
            await downloader.close()

    with pytest.raises(DownloadError):
        asyncio.run(_serve({"/cut": _truncated}, scenario))

    assert list(tmp_path.iterdir()) == []


def test_retries_with_more_attempts(tmp_path):
    destination = tmp_path / "subtitle_en.vtt"
    hits = []

    async def flaky(request):
        hits.append(request.path)
        if len(hits) == 1:
            return web.Response(status=503)
        return web.Response(body=b"WEBVTT\n")

    async def scenario(server):
        downloader = Downloader(max_attempts=2, base_delay=0)
        try:
            return await downloader.download_file(
                str(server.make_url("/sub")), destination
            )
        finally:
            await downloader.close()

    asyncio.run(_serve({"/sub": flaky}, scenario))

    assert len(hits) == 2
    assert destination.read_bytes() == b"WEBVTT\n"


def test_single_attempt_by_default(tmp_path):
    hits = []

    async def failing(request):
        hits.append(request.path)
        return web.Response(status=500)

    async def scenario(server):
        downloader = Downloader()
        try:
            await downloader.download_file(
                str(server.make_url("/x")), tmp_path / "x"
            )
        finally:
            await downloader.close()

    with pytest.raises(DownloadError):
        asyncio.run(_serve({"/x": failing}, scenario))
    assert hits == ["/x"]


def test_fetch_bytes(tmp_path):
    async def scenario(server):
        downloader = Downloader()
        try:
            return await downloader.fetch_bytes(str(server.make_url("/thumb")))
        finally:
            await downloader.close()

    assert asyncio.run(_serve({"/thumb": _ok}, scenario)) == PAYLOAD


class RecordingProgress:
    def __init__(self, interrupt=False):
        self.interrupt = interrupt
        self.active = set()

    def add_task(self, description, total):
        self.active.add(description)
        return description

    def update_task_progress(self, task_id, completed):
        if self.interrupt:
            raise asyncio.CancelledError

    def remove_task(self, task_id):
        self.active.discard(task_id)


def test_cancelled_transfer_clears_progress_and_partial_file(tmp_path):
    destination = tmp_path / "yt-dlp"
    progress = RecordingProgress(interrupt=True)

    async def scenario(server):
        downloader = Downloader()
        try:
            await downloader.download_file(
                str(server.make_url("/bin")), destination, progress=progress
            )
        finally:
            await downloader.close()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(_serve({"/bin": _ok}, scenario))

    assert progress.active == set()
    assert list(tmp_path.iterdir()) == []
