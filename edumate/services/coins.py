from sqlalchemy.orm import Session
from edumate.models import UserCoins


def get_coin_balance(db: Session, user_id: str) -> int:
    row = db.query(UserCoins).filter(UserCoins.user_id == user_id).first()
    return int(row.coin_balance) if row else 0


def credit_coins(db: Session, user_id: str, quantity: int) -> UserCoins:
    """Add ``quantity`` coins to the user's balance, creating the row on first credit.

    Does not commit: the caller settles the payment record in the same transaction.
    """
    if quantity <= 0:
        raise ValueError("Credited quantity must be positive")
    row = db.query(UserCoins).filter(UserCoins.user_id == user_id).with_for_update().first()
    if row:
        row.coin_balance = int(row.coin_balance or 0) + quantity
    else:
        # No balance row yet is the normal first-purchase path, not an error.
        row = UserCoins(user_id=user_id, coin_balance=quantity)
        db.add(row)
    db.flush()
    return row
