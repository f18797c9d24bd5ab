"""Lima metropolitan districts with zone and neighbour connectivity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DistrictInfo:
    zone: str
    neighbours: frozenset[str]


def _district(zone: str, *neighbours: str) -> DistrictInfo:
    return DistrictInfo(zone=zone, neighbours=frozenset(neighbours))


ZONE_NAMES: dict[str, str] = {
    "norte": "Lima Norte",
    "este": "Lima Este",
    "centro": "Lima Centro",
    "moderna": "Lima Moderna",
    "sur": "Lima Sur",
}

DISTRICTS: dict[str, DistrictInfo] = {
    # norte
    "Carabayllo": _district("norte", "Comas", "Puente Piedra", "Los Olivos", "Independencia"),
    "Comas": _district("norte", "Carabayllo", "Los Olivos", "Independencia", "San Martín de Porres"),
    "Puente Piedra": _district("norte", "Carabayllo", "Comas", "Los Olivos", "Santa Rosa"),
    "Los Olivos": _district("norte", "Comas", "Independencia", "San Martín de Porres", "Rímac"),
    "Independencia": _district("norte", "Comas", "Los Olivos", "San Martín de Porres", "Rímac"),
    "San Martín de Porres": _district(
        "norte", "Los Olivos", "Independencia", "Rímac", "Lima", "Callao"
    ),
    "Santa Rosa": _district("norte", "Puente Piedra", "Ancón"),
    # este
    "San Juan de Lurigancho": _district(
        "este", "Rímac", "El Agustino", "Lurigancho", "Independencia", "Comas"
    ),
    "Lurigancho": _district("este", "San Juan de Lurigancho", "Ate", "Chaclacayo", "Santa Anita"),
    "El Agustino": _district(
        "este", "San Juan de Lurigancho", "Santa Anita", "La Victoria", "San Luis"
    ),
    "Santa Anita": _district("este", "El Agustino", "Ate", "La Molina", "San Luis"),
    "Ate": _district("este", "Santa Anita", "La Molina", "Lurigancho", "Chaclacayo", "Cieneguilla"),
    "Chaclacayo": _district("este", "Ate", "Lurigancho", "Cieneguilla"),
    "Cieneguilla": _district("este", "Ate", "Chaclacayo", "Pachacámac"),
    # centro
    "Lima": _district(
        "centro", "Rímac", "San Martín de Porres", "La Victoria", "Breña", "Lince", "Jesús María"
    ),
    "Rímac": _district(
        "centro", "Lima", "San Martín de Porres", "Independencia", "San Juan de Lurigancho"
    ),
    "Breña": _district("centro", "Lima", "Pueblo Libre", "Jesús María", "Lince"),
    "Lince": _district(
        "centro", "Lima", "Breña", "Jesús María", "San Isidro", "Miraflores", "La Victoria"
    ),
    "Jesús María": _district(
        "centro", "Lima", "Breña", "Lince", "Pueblo Libre", "San Isidro", "Magdalena del Mar"
    ),
    "La Victoria": _district("centro", "Lima", "Lince", "San Luis", "El Agustino", "San Borja"),
    "San Luis": _district(
        "centro", "La Victoria", "El Agustino", "Santa Anita", "San Borja", "Surquillo"
    ),
    "Pueblo Libre": _district("centro", "Breña", "Jesús María", "Magdalena del Mar", "San Miguel"),
    "Magdalena del Mar": _district(
        "centro", "Jesús María", "Pueblo Libre", "San Isidro", "San Miguel"
    ),
    "San Miguel": _district("centro", "Pueblo Libre", "Magdalena del Mar", "Callao"),
    # moderna
    "San Isidro": _district(
        "moderna",
        "Jesús María",
        "Lince",
        "Miraflores",
        "San Borja",
        "Surquillo",
        "Magdalena del Mar",
    ),
    "Miraflores": _district(
        "moderna", "San Isidro", "Surquillo", "San Borja", "Barranco", "Santiago de Surco"
    ),
    "San Borja": _district(
        "moderna",
        "San Isidro",
        "Miraflores",
        "Surquillo",
        "La Victoria",
        "Santiago de Surco",
        "La Molina",
    ),
    "Surquillo": _district("moderna", "San Isidro", "Miraflores", "San Borja", "Santiago de Surco"),
    "Barranco": _district("moderna", "Miraflores", "Chorrillos", "Santiago de Surco"),
    "Santiago de Surco": _district(
        "moderna",
        "Miraflores",
        "San Borja",
        "Surquillo",
        "Barranco",
        "Chorrillos",
        "La Molina",
        "San Juan de Miraflores",
    ),
    "La Molina": _district(
        "moderna", "San Borja", "Santiago de Surco", "Ate", "Santa Anita", "Pachacámac"
    ),
    # sur
    "Chorrillos": _district(
        "sur", "Barranco", "Santiago de Surco", "San Juan de Miraflores", "Villa El Salvador"
    ),
    "San Juan de Miraflores": _district(
        "sur", "Santiago de Surco", "Chorrillos", "Villa María del Triunfo", "Villa El Salvador"
    ),
    "Villa María del Triunfo": _district(
        "sur", "San Juan de Miraflores", "Villa El Salvador", "Pachacámac", "La Molina"
    ),
    "Villa El Salvador": _district(
        "sur", "San Juan de Miraflores", "Villa María del Triunfo", "Chorrillos", "Lurín"
    ),
    "Lurín": _district("sur", "Villa El Salvador", "Pachacámac", "Punta Hermosa", "Pucusana"),
    "Pachacámac": _district("sur", "Lurín", "Villa María del Triunfo", "Cieneguilla", "La Molina"),
    "Punta Hermosa": _district("sur", "Lurín", "Punta Negra", "San Bartolo"),
    "Punta Negra": _district("sur", "Punta Hermosa", "San Bartolo"),
    "San Bartolo": _district("sur", "Punta Negra", "Santa María del Mar", "Pucusana"),
    "Santa María del Mar": _district("sur", "San Bartolo", "Pucusana"),
    "Pucusana": _district("sur", "Lurín", "Santa María del Mar", "San Bartolo"),
}


def zone_name(district: str) -> str:
    info = DISTRICTS.get(district)
    return ZONE_NAMES.get(info.zone, "Lima") if info else "Lima"


def districts_in_zone(district: str) -> list[str]:
    info = DISTRICTS.get(district)
    if info is None:
        return []
    return [name for name, other in DISTRICTS.items() if other.zone == info.zone]
