from fastapi import APIRouter, Body, Depends

from student_portal.dependencies.auth import get_current_identity, get_student_store
from student_portal.schemas.auth import Identity
from student_portal.schemas.student import ProfileResponse, StudentRecordOut, StudentSelfUpdate
from student_portal.services.access_policy import Section, require_section
from student_portal.services.profile import NO_RECORD_MESSAGE, ProfileController, ProfileState
from student_portal.services.student_service import StudentStore

router = APIRouter()


def _profile_response(identity: Identity, profile: ProfileController) -> ProfileResponse:
    if profile.state is ProfileState.HAS_RECORD:
        return ProfileResponse(
            state=profile.state.value,
            display_name=identity.display_name,
            email=identity.email,
            student=StudentRecordOut.model_validate(profile.record),
        )
    return ProfileResponse(
        state=profile.state.value,
        display_name=identity.display_name,
        email=identity.email,
        message=NO_RECORD_MESSAGE,
    )


@router.get("", response_model=ProfileResponse, summary="My profile")
def get_my_profile(
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    require_section(identity, Section.PROFILE)
    profile = ProfileController(store, identity)
    profile.load()
    return _profile_response(identity, profile)


@router.put("", response_model=ProfileResponse, summary="Update my student record")
def update_my_profile(
    req: StudentSelfUpdate = Body(...),
    store: StudentStore = Depends(get_student_store),
    identity: Identity = Depends(get_current_identity)
):
    require_section(identity, Section.PROFILE)
    profile = ProfileController(store, identity)
    profile.update_own(req.model_dump())
    return _profile_response(identity, profile)
