"""
Best property selection.

Chooses the property that anchors an organization's match.
"""

from rentpool.modules.properties.models import Property
from rentpool.modules.requests.models import RentalRequestBase
from rentpool.utils.text import fold


def property_fit(prop: Property, rental_request: RentalRequestBase) -> int:
    """
    Quick fit score of one property for a request.

    +30 city in request location, +25 rent inside the budget range or +20
    under the max budget (+10 when no max budget but rent is known), +20
    property type match, +15 exact bedrooms.
    """
    score = 0

    request_location = fold(rental_request.location)
    city = fold(prop.city)
    if city and city in request_location:
        score += 30

    rent = prop.monthly_rent
    max_budget = rental_request.max_budget
    min_budget = rental_request.min_budget
    if rent is not None:
        if max_budget is not None:
            if (min_budget is None or rent >= min_budget) and rent <= max_budget:
                score += 25
            elif rent <= max_budget:
                score += 20
        else:
            score += 10

    if (
        rental_request.property_type
        and prop.property_type
        and rental_request.property_type.lower() in prop.property_type.lower()
    ):
        score += 20

    if rental_request.bedrooms is not None and prop.bedrooms == rental_request.bedrooms:
        score += 15

    return score


def pick_best_property(
    properties: list[Property], rental_request: RentalRequestBase
) -> Property | None:
    """
    Pick the best fitting property; ties keep the original order.

    Args:
        properties: Organization's candidate properties
        rental_request: Normalized rental request

    Returns:
        Best property, or None for an empty list
    """
    if not properties:
        return None
    return max(properties, key=lambda p: property_fit(p, rental_request))
