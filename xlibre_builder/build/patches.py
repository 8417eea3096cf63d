"""
Source fixes applied in prepare(), keyed by package identifier.

Adding a fix for another driver means adding an entry here; the recipe
synthesizer renders whatever it finds for the identifier.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class PatchStep:
    description: str
    command: str
    verify: str
    missing_note: str


INTEL_PATCHES = [
    PatchStep(
        description="Fix __container_of redefinition",
        command="sed -i 's/__container_of/__intel_container_of/g' src/intel_list.h",
        verify='grep -H "__intel_container_of" src/intel_list.h',
        missing_note="No __intel_container_of found",
    ),
    PatchStep(
        description="Comment out FOURCC_RGB565 redefinition in sna_video.h",
        command=r"sed -i 's/#define FOURCC_RGB565/\/\/#define FOURCC_RGB565/' src/sna/sna_video.h",
        verify='grep -H "FOURCC_RGB565" src/sna/sna_video.h',
        missing_note="No FOURCC_RGB565 found",
    ),
    PatchStep(
        description="Add include for server.h in sna_accel.c",
        command=r"""sed -i '/#include "sna.h"/a #include <xorg\/server.h>' src/sna/sna_accel.c""",
        verify='grep -H "server.h" src/sna/sna_accel.c',
        missing_note="No server.h include found",
    ),
    PatchStep(
        description="Comment out sna_poly_fill_rect_stippled_nxm_blt",
        command=r"sed -i '/^static void *sna_poly_fill_rect_stippled_nxm_blt(/,/^}/ s/^/\/\/ /' src/sna/sna_accel.c",
        verify='grep -H -C 5 "sna_poly_fill_rect_stippled_nxm_blt" src/sna/sna_accel.c',
        missing_note="No sna_poly_fill_rect_stippled_nxm_blt found",
    ),
    PatchStep(
        description="Comment out sna_poly_fill_rect_stippled_n_box__imm",
        command=r"sed -i '/^static void *sna_poly_fill_rect_stippled_n_box__imm(/,/^}/ s/^/\/\/ /' src/sna/sna_accel.c",
        verify='grep -H -C 5 "sna_poly_fill_rect_stippled_n_box__imm" src/sna/sna_accel.c',
        missing_note="No sna_poly_fill_rect_stippled_n_box__imm found",
    ),
]

PREPARE_PATCHES: Dict[str, List[PatchStep]] = {
    "xlibre-video-intel": INTEL_PATCHES,
}


def patches_for(identifier: str) -> List[PatchStep]:
    return PREPARE_PATCHES.get(identifier, [])
