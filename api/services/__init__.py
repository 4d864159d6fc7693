"""
API Services Layer.

Database operations behind the API endpoints. Every function takes the
request's AsyncSession and the caller's identity explicitly.
"""

from api.services.talent import (
    create_or_update_talent_profile,
    get_talent_profile,
    get_current_user,
    delete_talent_profile,
)

from api.services.teams import (
    create_team,
    get_my_teams,
    update_team,
    delete_team,
)

from api.services.jobs import (
    create_job_posting,
    update_job_posting,
    deactivate_job_posting,
    get_team_job_postings,
)

from api.services.applications import (
    apply_to_job,
    get_my_applications,
    get_application_details,
    withdraw_application,
    get_team_applications,
    update_application_status,
)

from api.services.matches import (
    get_my_matches,
    get_team_matches,
    update_match_status,
)

from api.services.search import (
    search_job_postings_for_talent,
    advanced_search_job_postings,
    search_talent,
)

from api.services.options import (
    get_predefined_options,
    get_option_categories,
    search_predefined_options,
    add_predefined_option,
    update_predefined_option,
)

__all__ = [
    # Talent
    "create_or_update_talent_profile",
    "get_talent_profile",
    "get_current_user",
    "delete_talent_profile",
    # Teams
    "create_team",
    "get_my_teams",
    "update_team",
    "delete_team",
    # Job postings
    "create_job_posting",
    "update_job_posting",
    "deactivate_job_posting",
    "get_team_job_postings",
    # Applications
    "apply_to_job",
    "get_my_applications",
    "get_application_details",
    "withdraw_application",
    "get_team_applications",
    "update_application_status",
    # Matches
    "get_my_matches",
    "get_team_matches",
    "update_match_status",
    # Search
    "search_job_postings_for_talent",
    "advanced_search_job_postings",
    "search_talent",
    # Predefined options
    "get_predefined_options",
    "get_option_categories",
    "search_predefined_options",
    "add_predefined_option",
    "update_predefined_option",
]
