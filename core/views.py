# core/views.py
"""
Read-only JSON endpoints that populate the wizard's choices.
"""
import logging

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET

from shared.constants import ConfigTypes
from shared.helpers import split_param, parse_optional_int
from .exceptions import RegistrationValidationError
from .models import Branch
from .services import ConfigurationService, BranchEligibilityService, TimingAvailabilityResolver

logger = logging.getLogger(__name__)


def _serialize_branch(branch):
    return {
        'id': branch.id,
        'name_en': branch.name_en,
        'name_ar': branch.name_ar,
        'is_online': branch.is_online,
    }


# ============ CONFIGURATION ============

@require_GET
def configuration_view(request):
    """Active configuration options, grouped or for a single ?type=."""
    config_type = request.GET.get('type')

    if config_type:
        if config_type not in dict(ConfigTypes.CHOICES):
            raise RegistrationValidationError(f"Unknown configuration type '{config_type}'.")
        options = ConfigurationService.load(config_type)
        return JsonResponse({'type': config_type, 'options': [o.to_dict() for o in options]})

    groups = ConfigurationService.grouped()
    return JsonResponse({
        name: [o.to_dict() for o in options]
        for name, options in groups.items()
    })


# ============ BRANCHES ============

@require_GET
def branch_list_view(request):
    branches = Branch.objects.order_by('name_en')
    return JsonResponse({'branches': [_serialize_branch(b) for b in branches]})


@require_GET
def branch_eligibility_view(request, branch_id):
    branch = get_object_or_404(Branch, id=branch_id)
    eligibility = BranchEligibilityService.for_branch(branch.id)
    return JsonResponse(eligibility.to_dict())


@require_GET
def available_timings_view(request):
    """Timings offered for ?branch_id= given the current level/course selection."""
    branch_id = parse_optional_int(request.GET.get('branch_id'))
    levels = split_param(request.GET.get('levels'))
    courses = split_param(request.GET.get('courses'))

    timings = TimingAvailabilityResolver.for_branch(branch_id, levels, courses)
    return JsonResponse({
        'branch_id': branch_id,
        'levels': levels,
        'courses': courses,
        'timings': timings,
    })
