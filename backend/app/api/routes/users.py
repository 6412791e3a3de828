"""User directory admin endpoints.

Every route requires a live session (CurrentAccount). Any authenticated,
non-blocked account may administer the directory, including itself.

Endpoints:
- GET /users - list accounts, latest login first
- GET /users/me - the caller's own account
- POST /users/block - block accounts
- POST /users/unblock - unblock accounts
- DELETE /users/delete - delete accounts
- DELETE /users/delete-unverified - delete all unverified accounts
"""

from fastapi import APIRouter

from app.api.deps import CurrentAccount, DbSession
from app.core.responses import DataResponse
from app.schemas.account import AccountIdsRequest, AccountResponse, CountResponse
from app.services.account_lifecycle_service import AccountLifecycleService

router = APIRouter()


@router.get("")
async def list_users(
    _account: CurrentAccount,
    db: DbSession,
) -> DataResponse[list[AccountResponse]]:
    """List all accounts ordered by last login, then registration time."""
    accounts = await AccountLifecycleService(db).list_accounts()
    return DataResponse(data=[AccountResponse.from_account(a) for a in accounts])


@router.get("/me")
async def get_me(
    account: CurrentAccount,
    db: DbSession,
) -> DataResponse[AccountResponse]:
    """Return the caller's account."""
    current = await AccountLifecycleService(db).get_account(account.id)
    return DataResponse(data=AccountResponse.from_account(current))


@router.post("/block")
async def block_users(
    body: AccountIdsRequest,
    _account: CurrentAccount,
    db: DbSession,
) -> DataResponse[CountResponse]:
    """Block the listed accounts. Count is the number of ids requested."""
    count = await AccountLifecycleService(db).block_many(body.account_ids)
    return DataResponse(
        data=CountResponse(message=f"{count} user(s) blocked successfully", count=count)
    )


@router.post("/unblock")
async def unblock_users(
    body: AccountIdsRequest,
    _account: CurrentAccount,
    db: DbSession,
) -> DataResponse[CountResponse]:
    """Unblock the listed accounts. Non-blocked accounts are left as they are."""
    count = await AccountLifecycleService(db).unblock_many(body.account_ids)
    return DataResponse(
        data=CountResponse(
            message=f"{count} user(s) unblocked successfully", count=count
        )
    )


@router.delete("/delete")
async def delete_users(
    body: AccountIdsRequest,
    _account: CurrentAccount,
    db: DbSession,
) -> DataResponse[CountResponse]:
    """Delete the listed accounts. Count is the number of rows removed."""
    count = await AccountLifecycleService(db).delete_many(body.account_ids)
    return DataResponse(
        data=CountResponse(message=f"{count} user(s) deleted successfully", count=count)
    )


@router.delete("/delete-unverified")
async def delete_unverified_users(
    _account: CurrentAccount,
    db: DbSession,
) -> DataResponse[CountResponse]:
    """Delete every unverified account."""
    count = await AccountLifecycleService(db).delete_unverified()
    return DataResponse(
        data=CountResponse(
            message=f"{count} unverified user(s) deleted successfully", count=count
        )
    )
