from sqlalchemy import func

from soshi.db import db
from soshi.models.reaction_model import Reaction


def get_reaction(user_id, target_type, target_id):
    return Reaction.query.filter_by(
        user_id=user_id,
        target_type=target_type,
        target_id=target_id
    ).first()


def toggle_reaction(user_id, target_type, target_id, reaction_type):
    """Add, switch or remove a reaction; returns the user's reaction after."""
    reaction = get_reaction(user_id, target_type, target_id)

    if reaction:
        if reaction.type == reaction_type:
            db.session.delete(reaction)
            db.session.commit()
            return None
        reaction.type = reaction_type
    else:
        reaction = Reaction(
            user_id=user_id,
            target_type=target_type,
            target_id=target_id,
            type=reaction_type
        )
        db.session.add(reaction)

    db.session.commit()
    return reaction.type


def count_by_type(target_type: str, target_id: int) -> dict:
    rows = (
        db.session.query(Reaction.type, func.count(Reaction.id))
        .filter(
            Reaction.target_type == target_type,
            Reaction.target_id == target_id
        )
        .group_by(Reaction.type)
        .all()
    )
    return {reaction_type: count for reaction_type, count in rows}
