"""Tests for the in-memory GridFS-like engine."""

import pytest
from bson import ObjectId

from gridfile.registry.options import WriteOptions
from gridfile.storage import FileRecord, MemoryDatabase, MemoryGridEngine


async def blocks(*parts):
    for part in parts:
        yield part


class TestMemoryDatabase:
    """Bucket handling."""

    def test_buckets_are_created_on_access(self):
        db = MemoryDatabase()
        assert db["fs"] is db["fs"]
        assert db["fs"] is not db["uploads"]

    def test_cleanup(self):
        db = MemoryDatabase()
        db["fs"].files["x"] = {}
        db.cleanup()
        assert db["fs"].files == {}


class TestMemoryGridEngine:
    """Upload, lookup and delete."""

    def setup_method(self):
        self.db = MemoryDatabase()
        self.engine = MemoryGridEngine(self.db)

    def test_name(self):
        assert self.engine.name == "memory"

    @pytest.mark.asyncio
    async def test_upload_splits_into_chunks(self):
        options = WriteOptions(filename="a.bin", chunk_size=4)

        record = await self.engine.upload(blocks(b"abc", b"defgh", b"ij"), options)

        bucket = self.db["fs"]
        assert record.length == 10
        assert record.chunk_size == 4
        assert [bucket.chunks[(record.id, n)] for n in range(3)] == [b"abcd", b"efgh", b"ij"]
        assert bucket.files[record.id]["filename"] == "a.bin"

    @pytest.mark.asyncio
    async def test_upload_uses_bucket(self):
        engine = MemoryGridEngine(self.db, bucket="uploads")

        record = await engine.upload(blocks(b"x"), WriteOptions(filename="x"))

        assert record.id in self.db["uploads"].files
        assert self.db["fs"].files == {}

    @pytest.mark.asyncio
    async def test_duplicate_id_is_rejected(self):
        oid = ObjectId()
        await self.engine.upload(blocks(b"one"), WriteOptions(filename="a", file_id=oid))

        with pytest.raises(FileExistsError):
            await self.engine.upload(blocks(b"two"), WriteOptions(filename="b", file_id=oid))

    @pytest.mark.asyncio
    async def test_failed_upload_leaves_no_chunks(self):
        async def failing():
            yield b"a" * 10
            raise OSError("disk gone")

        with pytest.raises(OSError, match="disk gone"):
            await self.engine.upload(failing(), WriteOptions(filename="f", chunk_size=4))

        assert self.db["fs"].chunks == {}
        assert self.db["fs"].files == {}

    @pytest.mark.asyncio
    async def test_find_one_and_find_ids(self):
        first = await self.engine.upload(blocks(b"1"), WriteOptions(filename="same"))
        second = await self.engine.upload(blocks(b"2"), WriteOptions(filename="same"))

        found = await self.engine.find_one({"filename": "same"})

        assert found.id == second.id
        assert set(await self.engine.find_ids({"filename": "same"})) == {first.id, second.id}
        assert await self.engine.find_one({"filename": "other"}) is None
        assert await self.engine.find_ids({"filename": "other"}) == []

    @pytest.mark.asyncio
    async def test_data_exists(self):
        record = await self.engine.upload(blocks(b"data"), WriteOptions(filename="d"))
        assert await self.engine.data_exists(record)

        self.db["fs"].chunks.clear()
        assert not await self.engine.data_exists(record)

    @pytest.mark.asyncio
    async def test_empty_file_has_data(self):
        record = FileRecord(id=ObjectId(), filename="empty", length=0, chunk_size=4)
        assert await self.engine.data_exists(record)

    @pytest.mark.asyncio
    async def test_read_stream_partial_reads(self):
        record = await self.engine.upload(blocks(b"abcdefghij"), WriteOptions(filename="r", chunk_size=3))

        stream = await self.engine.open_read(record)

        assert await stream.read(2) == b"ab"
        assert await stream.read(5) == b"cdefg"
        assert await stream.read() == b"hij"
        assert await stream.read() == b""
        await stream.close()

    @pytest.mark.asyncio
    async def test_read_stream_missing_middle_chunk(self):
        record = await self.engine.upload(blocks(b"abcdefghij"), WriteOptions(filename="r", chunk_size=3))
        del self.db["fs"].chunks[(record.id, 1)]

        stream = await self.engine.open_read(record)

        with pytest.raises(IOError, match="missing chunk 1"):
            await stream.read()

    @pytest.mark.asyncio
    async def test_delete(self):
        record = await self.engine.upload(blocks(b"abcdef"), WriteOptions(filename="del", chunk_size=2))

        await self.engine.delete(record.id)

        assert self.db["fs"].files == {}
        assert self.db["fs"].chunks == {}

    @pytest.mark.asyncio
    async def test_delete_missing_is_not_an_error(self):
        await self.engine.delete(ObjectId())
