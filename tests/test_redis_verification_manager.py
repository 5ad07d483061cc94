import logging

import pytest

from island_api.schemas.verification import VerificationPurpose
from island_api.tools.redis_verification_manager import (RedisVerificationManager,
                                                         parse_key, run)

MALFORMED_KEYS = ("verification:legacy", "verification:unknown:c@x.com")


@pytest.fixture
async def seeded(verification_service, fake_redis, clock):
    await verification_service.issue("a@x.com", VerificationPurpose.registration)
    await verification_service.issue("b@x.com", VerificationPurpose.registration)
    await verification_service.issue("b@x.com", VerificationPurpose.password_reset)
    await fake_redis.set("unrelated", "1")
    for key in MALFORMED_KEYS:
        await fake_redis.set(key, "1")
    clock.advance(100)
    return RedisVerificationManager(fake_redis, service=verification_service)


@pytest.mark.asyncio
async def test_list_codes_hides_code(seeded):
    codes = await seeded.list_all_verification_codes()

    assert [c["key"] for c in codes] == [
        "verification:password-reset:b@x.com",
        "verification:registration:a@x.com",
        "verification:registration:b@x.com",
    ]
    assert codes[1] == {
        "key": "verification:registration:a@x.com",
        "email": "a@x.com",
        "purpose": "registration",
        "ttl": 500,
    }


@pytest.mark.asyncio
async def test_malformed_keys_are_skipped(seeded, caplog):
    with caplog.at_level(logging.WARNING, logger="tools"):
        codes = await seeded.list_all_verification_codes()

    assert len(codes) == 3
    assert "verification:legacy" in caplog.text


@pytest.mark.asyncio
async def test_stats(seeded):
    stats = await seeded.get_stats()

    assert stats["total_codes"] == 3
    assert stats["registration_codes"] == 2
    assert stats["password-reset_codes"] == 1
    assert "legacy_codes" not in stats
    assert "unknown_codes" not in stats


@pytest.mark.asyncio
async def test_cleanup_only_touches_verification_keys(seeded, fake_redis):
    result = await seeded.cleanup_all_verification_data()

    assert result == {"deleted_count": 3}
    assert await seeded.list_all_verification_codes() == []
    assert await fake_redis.get("unrelated") == "1"
    for key in MALFORMED_KEYS:
        assert await fake_redis.get(key) == "1"


@pytest.mark.asyncio
async def test_cli_commands(seeded, capsys):
    assert await run("list-codes", seeded) == 0
    assert "找到 3 个验证码" in capsys.readouterr().out

    assert await run("stats", seeded) == 0
    assert "total_codes: 3" in capsys.readouterr().out

    assert await run("cleanup", seeded) == 0
    assert "删除了 3 个键" in capsys.readouterr().out

    assert await run("bogus", seeded) == 1
    assert "未知命令" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_cli_status(seeded, capsys):
    assert await run("status", seeded, ["a@x.com", "registration"]) == 0
    out = capsys.readouterr().out
    assert "邮箱: a@x.com, 用途: registration, TTL: 500s" in out
    assert "可重新发送: 是" in out

    assert await run("status", seeded, ["nobody@x.com", "password-reset"]) == 0
    assert "没有有效的验证码" in capsys.readouterr().out

    assert await run("status", seeded, ["a@x.com", "legacy"]) == 1
    assert "用途必须是" in capsys.readouterr().out

    assert await run("status", seeded, ["a@x.com"]) == 1


@pytest.mark.asyncio
async def test_status_during_store_outage(seeded, fake_redis, capsys):
    fake_redis.failing_commands.add("ttl")

    assert await seeded.get_status("a@x.com", "registration") is None
    assert await run("status", seeded, ["a@x.com", "registration"]) == 0
    assert "没有有效的验证码" in capsys.readouterr().out


def test_parse_key():
    assert parse_key("verification:registration:a@x.com") == ("registration", "a@x.com")
    assert parse_key("verification:password-reset:b@x.com") == ("password-reset", "b@x.com")
    assert parse_key("verification:legacy") is None
    assert parse_key("verification:unknown:c@x.com") is None
    assert parse_key("verification:registration:") is None
