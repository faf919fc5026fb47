"""
Referral service tests.
"""

import random
from datetime import timedelta

import pytest
from sqlalchemy import select

from app.models.client import Client
from app.models.referral import Referral, ReferralStatus, RewardType
from app.schemas.referral import ReferralInviteCreate, ReferralRedeemRequest
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.services.referral_service import ReferralService
from app.utils.clock import utcnow

from factories import TENANT_ID, create_client, reload


SETTINGS = TenantSettingsSnapshot(referral_code_expiry_days=30)


def make_service(session, seed=7):
    return ReferralService(session, rng=random.Random(seed))


async def invite(service, referrer, settings=SETTINGS, **kwargs):
    return await service.create_invitation(
        TENANT_ID,
        ReferralInviteCreate(referrer_id=referrer.id, **kwargs),
        settings,
    )


@pytest.mark.asyncio
async def test_invitation_code_is_personalized_and_expires(test_db_session):
    referrer = await create_client(test_db_session, name="Martin Král")
    service = make_service(test_db_session)

    referral = await invite(service, referrer, referred_email="friend@example.com")

    assert referral.code.startswith("MART")
    assert len(referral.code) == 8
    assert referral.status == ReferralStatus.PENDING
    assert referral.referrer_id == referrer.id
    assert referral.expires_at is not None
    assert referral.expires_at - utcnow() > timedelta(days=29)


@pytest.mark.asyncio
async def test_invitations_without_expiry(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)

    referral = await invite(service, referrer, TenantSettingsSnapshot(referral_code_expiry_days=None))

    assert referral.expires_at is None


@pytest.mark.asyncio
async def test_invitation_limits(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)
    limited = TenantSettingsSnapshot(max_referrals_per_client=1)

    await invite(service, referrer, limited)
    with pytest.raises(ValueError, match="limit"):
        await invite(service, referrer, limited)

    with pytest.raises(ValueError, match="disabled"):
        await invite(service, referrer, TenantSettingsSnapshot(referrals_enabled=False))


@pytest.mark.asyncio
async def test_validate_pending_code(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)
    referral = await invite(service, referrer)

    result = await service.validate_code(TENANT_ID, f"  {referral.code.lower()} ")

    assert result.valid is True
    assert result.source == "referral"
    assert result.code == referral.code
    assert result.referrer_client_id == referrer.id
    assert result.referral.id == referral.id


@pytest.mark.asyncio
async def test_unknown_code(test_db_session):
    service = make_service(test_db_session)

    result = await service.validate_code(TENANT_ID, "NOPE2345")

    assert result.valid is False
    assert result.reason == "not_found"
    assert result.error == "Invalid referral code"


@pytest.mark.asyncio
async def test_codes_do_not_leak_across_tenants(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)
    referral = await invite(service, referrer)

    result = await service.validate_code("other-tenant", referral.code)

    assert result.valid is False
    assert result.reason == "not_found"


@pytest.mark.asyncio
async def test_expired_code_is_persisted_as_expired(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)
    referral = await invite(service, referrer)

    result = await service.validate_code(TENANT_ID, referral.code, now=utcnow() + timedelta(days=31))

    assert result.valid is False
    assert result.reason == "expired"
    stored = await reload(test_db_session, Referral, referral.id)
    assert stored.status == ReferralStatus.EXPIRED

    # Expiry is one-way
    again = await service.validate_code(TENANT_ID, referral.code)
    assert again.reason == "expired"


@pytest.mark.asyncio
async def test_redeem_marks_code_used_once(test_db_session):
    referrer = await create_client(test_db_session)
    newcomer = await create_client(test_db_session, name="Eva Malá", email="eva@example.com")
    another = await create_client(test_db_session, name="Petr Novák", email="petr@example.com")
    service = make_service(test_db_session)
    referral = await invite(service, referrer)

    result = await service.redeem_code(
        TENANT_ID, ReferralRedeemRequest(code=referral.code, referred_client_id=newcomer.id)
    )

    assert result.valid is True
    assert result.referral.status == ReferralStatus.USED
    assert result.referral.referred_client_id == newcomer.id
    assert result.referral.used_at is not None
    stored_client = await reload(test_db_session, Client, newcomer.id)
    assert stored_client.referred_by_id == referrer.id

    validation = await service.validate_code(TENANT_ID, referral.code)
    assert validation.valid is False
    assert validation.reason == "already_used"

    with pytest.raises(ValueError, match="already been used"):
        await service.redeem_code(
            TENANT_ID, ReferralRedeemRequest(code=referral.code, referred_client_id=another.id)
        )


@pytest.mark.asyncio
async def test_used_code_cannot_expire(test_db_session):
    referrer = await create_client(test_db_session)
    newcomer = await create_client(test_db_session, name="Eva Malá")
    service = make_service(test_db_session)
    referral = await invite(service, referrer)
    await service.redeem_code(TENANT_ID, ReferralRedeemRequest(code=referral.code, referred_client_id=newcomer.id))

    result = await service.validate_code(TENANT_ID, referral.code, now=utcnow() + timedelta(days=365))

    assert result.reason == "already_used"
    stored = await reload(test_db_session, Referral, referral.id)
    assert stored.status == ReferralStatus.USED


@pytest.mark.asyncio
async def test_standing_client_code(test_db_session):
    referrer = await create_client(test_db_session, name="Lucie Horáková")
    newcomer = await create_client(test_db_session, name="Tomáš Beneš")
    service = make_service(test_db_session)

    issued = await service.get_or_create_client_code(TENANT_ID, referrer.id)
    again = await service.get_or_create_client_code(TENANT_ID, referrer.id)

    assert issued.referral_code.startswith("LUCI")
    assert again.referral_code == issued.referral_code

    validation = await service.validate_code(TENANT_ID, issued.referral_code)
    assert validation.valid is True
    assert validation.source == "client_code"
    assert validation.referrer_client_id == referrer.id

    await service.redeem_code(
        TENANT_ID, ReferralRedeemRequest(code=issued.referral_code, referred_client_id=newcomer.id)
    )
    # A standing code stays valid after use
    assert (await service.validate_code(TENANT_ID, issued.referral_code)).valid is True


@pytest.mark.asyncio
async def test_self_referral_is_rejected(test_db_session):
    referrer = await create_client(test_db_session)
    service = make_service(test_db_session)
    issued = await service.get_or_create_client_code(TENANT_ID, referrer.id)

    with pytest.raises(ValueError, match="own referral code"):
        await service.redeem_code(
            TENANT_ID, ReferralRedeemRequest(code=issued.referral_code, referred_client_id=referrer.id)
        )


@pytest.mark.asyncio
async def test_generated_codes_avoid_client_codes(test_db_session):
    referrer = await create_client(test_db_session, name="Karel")
    service = make_service(test_db_session, seed=11)
    issued = await service.get_or_create_client_code(TENANT_ID, referrer.id)

    # Same seed draws the same first candidate, which is now taken
    retry = make_service(test_db_session, seed=11)
    code = await retry.generate_personalized_code("Karel")

    assert code != issued.referral_code
    assert code.startswith("KARE")


@pytest.mark.asyncio
async def test_referral_stats(test_db_session):
    referrer = await create_client(test_db_session)
    newcomer = await create_client(test_db_session, name="Eva Malá")
    service = make_service(test_db_session)
    used = await invite(service, referrer)
    expired = await invite(service, referrer)
    await invite(service, referrer)
    await invite(service, referrer)
    await service.redeem_code(TENANT_ID, ReferralRedeemRequest(code=used.code, referred_client_id=newcomer.id))
    await service.validate_code(TENANT_ID, expired.code, now=utcnow() + timedelta(days=60))

    stats = await service.get_referral_stats(TENANT_ID)

    assert stats.total == 4
    assert stats.pending == 2
    assert stats.used == 1
    assert stats.expired == 1
    assert stats.conversion_rate == 25.0

    referrals, total = await service.list_referrals(TENANT_ID, status=ReferralStatus.PENDING)
    assert total == 2
    assert all(r.status == ReferralStatus.PENDING for r in referrals)


@pytest.mark.asyncio
async def test_redeeming_an_invitation_rewards_both_sides(test_db_session):
    referrer = await create_client(test_db_session)
    newcomer = await create_client(test_db_session, name="Eva Malá", notes="Prefers evenings")
    service = make_service(test_db_session)
    referral = await invite(service, referrer)
    referrer_id, newcomer_id = referrer.id, newcomer.id

    result = await service.redeem_code(
        TENANT_ID,
        ReferralRedeemRequest(code=referral.code, referred_client_id=newcomer_id),
        TenantSettingsSnapshot(
            referrer_reward_type=RewardType.CREDITS,
            referrer_reward_value=2,
            referred_reward_type=RewardType.DISCOUNT,
            referred_reward_value=15,
        ),
    )

    assert result.referrer_reward.type == RewardType.CREDITS
    assert result.referrer_reward.description == "2 free credits"
    assert result.referred_reward.description == "15% off the next purchase"
    assert result.referral.referrer_reward_applied is True
    assert result.referral.referred_reward_applied is True
    assert result.referral.rewarded_at is not None
    assert result.referral.status == ReferralStatus.USED

    stored_referrer = await reload(test_db_session, Client, referrer_id)
    stored_newcomer = await reload(test_db_session, Client, newcomer_id)
    assert stored_referrer.credits_balance == 2
    assert stored_newcomer.credits_balance == 0
    assert stored_newcomer.notes == "Prefers evenings\n[Referral discount: 15% off next purchase]"


@pytest.mark.asyncio
async def test_zero_value_rewards_are_not_granted(test_db_session):
    referrer = await create_client(test_db_session)
    newcomer = await create_client(test_db_session, name="Eva Malá")
    service = make_service(test_db_session)
    referral = await invite(service, referrer)

    result = await service.redeem_code(
        TENANT_ID,
        ReferralRedeemRequest(code=referral.code, referred_client_id=newcomer.id),
        TenantSettingsSnapshot(referrer_reward_value=0, referred_reward_value=0),
    )

    assert result.referrer_reward is None
    assert result.referred_reward is None
    assert result.referral.referrer_reward_applied is False
    assert result.referral.referred_reward_applied is False
    assert result.referral.rewarded_at is None
    assert result.referral.status == ReferralStatus.USED


@pytest.mark.asyncio
async def test_standing_code_redemption_rewards_without_referral_record(test_db_session):
    referrer = await create_client(test_db_session, name="Lucie Horáková")
    newcomer = await create_client(test_db_session, name="Tomáš Beneš")
    service = make_service(test_db_session)
    issued = await service.get_or_create_client_code(TENANT_ID, referrer.id)
    referrer_id = referrer.id

    result = await service.redeem_code(
        TENANT_ID,
        ReferralRedeemRequest(code=issued.referral_code, referred_client_id=newcomer.id),
        TenantSettingsSnapshot(referred_reward_type=RewardType.CASH, referred_reward_value=200),
    )

    assert result.source == "client_code"
    assert result.referral is None
    assert result.referrer_reward.description == "1 free credit"
    assert result.referred_reward.description == "200 CZK cash reward"
    stored_referrer = await reload(test_db_session, Client, referrer_id)
    assert stored_referrer.credits_balance == 1
    assert (await test_db_session.execute(select(Referral))).scalars().all() == []
