"""
Static place table for address resolution.

Cities, towns, villages, districts and landmarks across Jamaica's parishes
with their coordinates. Used to turn free-text move addresses into points for
distance and route estimation.
"""

import enum
from dataclasses import dataclass


class PlaceType(str, enum.Enum):
    CITY = "city"
    TOWN = "town"
    VILLAGE = "village"
    DISTRICT = "district"
    LANDMARK = "landmark"


# Search ranking: lower sorts first
PLACE_TYPE_RANK = {
    PlaceType.CITY: 0,
    PlaceType.TOWN: 1,
    PlaceType.DISTRICT: 2,
    PlaceType.LANDMARK: 3,
    PlaceType.VILLAGE: 4,
}


@dataclass(frozen=True)
class Place:
    name: str
    parish: str
    lat: float
    lon: float
    type: PlaceType

    @property
    def coordinates(self) -> tuple:
        return (self.lat, self.lon)


PLACES = (
    Place("Kingston", "Kingston", 17.9714, -76.7920, PlaceType.CITY),
    Place("Montego Bay", "St. James", 18.4762, -77.8939, PlaceType.CITY),
    Place("Spanish Town", "St. Catherine", 17.9961, -76.9530, PlaceType.CITY),
    Place("Portmore", "St. Catherine", 17.9519, -76.8798, PlaceType.CITY),
    Place("Mandeville", "Manchester", 18.0431, -77.5074, PlaceType.CITY),
    Place("May Pen", "Clarendon", 17.9691, -77.2462, PlaceType.TOWN),
    Place("Old Harbour", "St. Catherine", 17.9419, -77.1083, PlaceType.TOWN),
    Place("Savanna-la-Mar", "Westmoreland", 18.2167, -78.1333, PlaceType.TOWN),
    Place("Ocho Rios", "St. Ann", 18.4075, -77.1050, PlaceType.TOWN),
    Place("Negril", "Westmoreland", 18.2681, -78.3494, PlaceType.TOWN),
    Place("Falmouth", "Trelawny", 18.4936, -77.6561, PlaceType.TOWN),
    Place("Port Antonio", "Portland", 18.1789, -76.4508, PlaceType.TOWN),
    Place("Black River", "St. Elizabeth", 18.0258, -77.8486, PlaceType.TOWN),
    Place("Linstead", "St. Catherine", 18.1333, -77.0333, PlaceType.TOWN),
    Place("Half Way Tree", "St. Andrew", 18.0108, -76.7983, PlaceType.TOWN),
    Place("New Kingston", "St. Andrew", 18.0060, -76.7853, PlaceType.DISTRICT),
    Place("Constant Spring", "St. Andrew", 18.0333, -76.7833, PlaceType.TOWN),
    Place("Papine", "St. Andrew", 18.0194, -76.7439, PlaceType.TOWN),
    Place("Cross Roads", "St. Andrew", 18.0028, -76.7914, PlaceType.DISTRICT),
    Place("Liguanea", "St. Andrew", 18.0150, -76.7700, PlaceType.DISTRICT),
    Place("Morant Bay", "St. Thomas", 17.8817, -76.4083, PlaceType.TOWN),
    Place("Port Maria", "St. Mary", 18.3722, -76.8911, PlaceType.TOWN),
    Place("St. Ann's Bay", "St. Ann", 18.4319, -77.2028, PlaceType.TOWN),
    Place("Brown's Town", "St. Ann", 18.3967, -77.2594, PlaceType.TOWN),
    Place("Lucea", "Hanover", 18.4500, -78.1667, PlaceType.TOWN),
    Place("Port Royal", "Kingston", 17.9361, -76.8417, PlaceType.TOWN),
    Place("Bull Bay", "St. Andrew", 17.9347, -76.6861, PlaceType.VILLAGE),
    Place("Gordon Town", "St. Andrew", 18.0428, -76.7281, PlaceType.VILLAGE),
    Place("Irish Town", "St. Andrew", 18.0667, -76.7167, PlaceType.VILLAGE),
    Place("Stony Hill", "St. Andrew", 18.0500, -76.7667, PlaceType.VILLAGE),
    Place("Chapelton", "Clarendon", 18.0500, -77.2667, PlaceType.TOWN),
    Place("Lionel Town", "Clarendon", 17.8917, -77.2000, PlaceType.TOWN),
    Place("Frankfield", "Clarendon", 18.0833, -77.3000, PlaceType.VILLAGE),
    Place("Hayes", "Clarendon", 17.8833, -77.2500, PlaceType.VILLAGE),
    Place("Milk River", "Clarendon", 17.8667, -77.3000, PlaceType.VILLAGE),
    Place("Rocky Point", "Clarendon", 17.8167, -77.1500, PlaceType.VILLAGE),
    Place("Christiana", "Manchester", 18.1833, -77.4833, PlaceType.TOWN),
    Place("Porus", "Manchester", 17.9833, -77.4167, PlaceType.TOWN),
    Place("Williamsfield", "Manchester", 18.0500, -77.5333, PlaceType.VILLAGE),
    Place("Mile Gully", "Manchester", 18.1500, -77.5333, PlaceType.VILLAGE),
    Place("Grove Place", "Manchester", 18.0667, -77.5167, PlaceType.VILLAGE),
    Place("Santa Cruz", "St. Elizabeth", 18.0667, -77.8000, PlaceType.TOWN),
    Place("Junction", "St. Elizabeth", 18.0000, -77.7833, PlaceType.VILLAGE),
    Place("Treasure Beach", "St. Elizabeth", 17.8833, -77.7500, PlaceType.VILLAGE),
    Place("Malvern", "St. Elizabeth", 18.0167, -77.7667, PlaceType.VILLAGE),
    Place("Balaclava", "St. Elizabeth", 18.1500, -77.6333, PlaceType.VILLAGE),
    Place("Lacovia", "St. Elizabeth", 18.0833, -77.7667, PlaceType.VILLAGE),
    Place("Middle Quarters", "St. Elizabeth", 18.0500, -77.7833, PlaceType.VILLAGE),
    Place("Whitehouse", "Westmoreland", 18.0500, -77.9667, PlaceType.VILLAGE),
    Place("Little London", "Westmoreland", 18.2500, -78.2167, PlaceType.VILLAGE),
    Place("Petersfield", "Westmoreland", 18.1833, -78.0500, PlaceType.VILLAGE),
    Place("Bluefields", "Westmoreland", 18.1667, -78.0333, PlaceType.VILLAGE),
    Place("Frome", "Westmoreland", 18.2333, -78.0833, PlaceType.VILLAGE),
    Place("Grange Hill", "Westmoreland", 18.2833, -78.1333, PlaceType.VILLAGE),
    Place("Anchovy", "St. James", 18.4000, -77.9333, PlaceType.VILLAGE),
    Place("Rose Hall", "St. James", 18.5167, -77.8333, PlaceType.VILLAGE),
    Place("Ironshore", "St. James", 18.4833, -77.8500, PlaceType.DISTRICT),
    Place("Reading", "St. James", 18.4167, -77.9167, PlaceType.VILLAGE),
    Place("Cambridge", "St. James", 18.3333, -77.9000, PlaceType.VILLAGE),
    Place("Adelphi", "St. James", 18.3667, -77.9500, PlaceType.VILLAGE),
    Place("Duncans", "Trelawny", 18.4667, -77.5333, PlaceType.VILLAGE),
    Place("Albert Town", "Trelawny", 18.2833, -77.5333, PlaceType.VILLAGE),
    Place("Clark's Town", "Trelawny", 18.3500, -77.5333, PlaceType.VILLAGE),
    Place("Wakefield", "Trelawny", 18.3667, -77.5833, PlaceType.VILLAGE),
    Place("Wait-a-Bit", "Trelawny", 18.3167, -77.5500, PlaceType.VILLAGE),
    Place("Rio Bueno", "Trelawny", 18.4667, -77.4500, PlaceType.VILLAGE),
    Place("Discovery Bay", "St. Ann", 18.4500, -77.4000, PlaceType.TOWN),
    Place("Runaway Bay", "St. Ann", 18.4583, -77.3167, PlaceType.TOWN),
    Place("Claremont", "St. Ann", 18.3167, -77.1833, PlaceType.VILLAGE),
    Place("Alexandria", "St. Ann", 18.3333, -77.2833, PlaceType.VILLAGE),
    Place("Moneague", "St. Ann", 18.2333, -77.1000, PlaceType.VILLAGE),
    Place("Steer Town", "St. Ann", 18.4167, -77.2167, PlaceType.VILLAGE),
    Place("Annotto Bay", "St. Mary", 18.2708, -76.7653, PlaceType.TOWN),
    Place("Oracabessa", "St. Mary", 18.4014, -76.9450, PlaceType.TOWN),
    Place("Highgate", "St. Mary", 18.3000, -76.8833, PlaceType.VILLAGE),
    Place("Gayle", "St. Mary", 18.3500, -76.9167, PlaceType.VILLAGE),
    Place("Castleton", "St. Mary", 18.1500, -76.8333, PlaceType.VILLAGE),
    Place("Richmond", "St. Mary", 18.3167, -76.8667, PlaceType.VILLAGE),
    Place("Buff Bay", "Portland", 18.2333, -76.6500, PlaceType.TOWN),
    Place("Boston Bay", "Portland", 18.1833, -76.3667, PlaceType.VILLAGE),
    Place("Long Bay", "Portland", 18.1167, -76.3000, PlaceType.VILLAGE),
    Place("Hope Bay", "Portland", 18.2000, -76.5500, PlaceType.VILLAGE),
    Place("Manchioneal", "Portland", 18.0333, -76.2833, PlaceType.VILLAGE),
    Place("Fairy Hill", "Portland", 18.1500, -76.3833, PlaceType.VILLAGE),
    Place("San San", "Portland", 18.1667, -76.4000, PlaceType.VILLAGE),
    Place("Yallahs", "St. Thomas", 17.8833, -76.5500, PlaceType.TOWN),
    Place("Bath", "St. Thomas", 17.9667, -76.3667, PlaceType.VILLAGE),
    Place("Port Morant", "St. Thomas", 17.8917, -76.3333, PlaceType.TOWN),
    Place("Golden Grove", "St. Thomas", 17.9500, -76.3833, PlaceType.VILLAGE),
    Place("Seaforth", "St. Thomas", 17.9333, -76.3500, PlaceType.VILLAGE),
    Place("Lyssons", "St. Thomas", 17.8667, -76.4333, PlaceType.VILLAGE),
    Place("Green Island", "Hanover", 18.3833, -78.2833, PlaceType.VILLAGE),
    Place("Sandy Bay", "Hanover", 18.4333, -78.2167, PlaceType.VILLAGE),
    Place("Hopewell", "Hanover", 18.4333, -78.0833, PlaceType.VILLAGE),
    Place("Askenish", "Hanover", 18.3667, -78.1167, PlaceType.VILLAGE),
    Place("Bog Walk", "St. Catherine", 18.1000, -77.0000, PlaceType.TOWN),
    Place("Ewarton", "St. Catherine", 18.1833, -77.0833, PlaceType.VILLAGE),
    Place("Above Rocks", "St. Catherine", 18.0833, -76.9333, PlaceType.VILLAGE),
    Place("Gregory Park", "St. Catherine", 17.9667, -76.8833, PlaceType.DISTRICT),
    Place("Waterford", "St. Catherine", 17.9833, -76.8667, PlaceType.DISTRICT),
    Place("Central Village", "St. Catherine", 17.9667, -76.9167, PlaceType.DISTRICT),
    Place("Hellshire", "St. Catherine", 17.9167, -76.9000, PlaceType.DISTRICT),
    Place("Ferry", "St. Catherine", 17.9333, -76.8500, PlaceType.VILLAGE),
    Place("Downtown Kingston", "Kingston", 17.9742, -76.7928, PlaceType.DISTRICT),
    Place("Mona", "St. Andrew", 18.0167, -76.7500, PlaceType.DISTRICT),
    Place("August Town", "St. Andrew", 18.0167, -76.7333, PlaceType.DISTRICT),
    Place("Barbican", "St. Andrew", 18.0333, -76.7667, PlaceType.DISTRICT),
    Place("Hope Pastures", "St. Andrew", 18.0167, -76.7667, PlaceType.DISTRICT),
    Place("Manor Park", "St. Andrew", 18.0333, -76.7833, PlaceType.DISTRICT),
    Place("Red Hills", "St. Andrew", 18.0667, -76.8000, PlaceType.VILLAGE),
    Place("Cherry Gardens", "St. Andrew", 18.0167, -76.8000, PlaceType.DISTRICT),
    Place("Vineyard Town", "Kingston", 17.9833, -76.7667, PlaceType.DISTRICT),
    Place("Rockfort", "Kingston", 17.9667, -76.7500, PlaceType.DISTRICT),
    Place("Harbour View", "St. Andrew", 17.9500, -76.7167, PlaceType.DISTRICT),
    Place("Mountain View", "Kingston", 17.9833, -76.7500, PlaceType.DISTRICT),
    Place("Trench Town", "Kingston", 17.9833, -76.8000, PlaceType.DISTRICT),
    Place("Jones Town", "Kingston", 17.9833, -76.7833, PlaceType.DISTRICT),
    Place("Duhaney Park", "St. Andrew", 18.0167, -76.8167, PlaceType.DISTRICT),
    Place("Havendale", "St. Andrew", 18.0333, -76.8167, PlaceType.DISTRICT),
    Place("Meadowbrook", "St. Andrew", 18.0333, -76.8000, PlaceType.DISTRICT),
    Place("Norbrook", "St. Andrew", 18.0333, -76.8000, PlaceType.DISTRICT),
    Place("Skyline", "St. Andrew", 18.0500, -76.7833, PlaceType.DISTRICT),
    Place("Jack's Hill", "St. Andrew", 18.0500, -76.7500, PlaceType.VILLAGE),
    Place("Norman Manley International Airport", "Kingston", 17.9356, -76.7875, PlaceType.LANDMARK),
    Place("Sangster International Airport", "St. James", 18.5037, -77.9133, PlaceType.LANDMARK),
    Place("University of the West Indies", "St. Andrew", 18.0050, -76.7500, PlaceType.LANDMARK),
    Place("Emancipation Park", "St. Andrew", 18.0089, -76.7831, PlaceType.LANDMARK),
    Place("Devon House", "St. Andrew", 18.0111, -76.7856, PlaceType.LANDMARK),
    Place("Dunn's River Falls", "St. Ann", 18.4139, -77.1353, PlaceType.LANDMARK),
    Place("Bob Marley Museum", "St. Andrew", 18.0142, -76.7889, PlaceType.LANDMARK),
    Place("Blue Mountains", "St. Andrew", 18.0500, -76.6000, PlaceType.LANDMARK),
    Place("Appleton Estate", "St. Elizabeth", 18.1667, -77.7333, PlaceType.LANDMARK),
    Place("YS Falls", "St. Elizabeth", 18.1583, -77.7500, PlaceType.LANDMARK),
    Place("National Heroes Park", "Kingston", 17.9889, -76.7933, PlaceType.LANDMARK),
    Place("Hope Gardens", "St. Andrew", 18.0139, -76.7528, PlaceType.LANDMARK),
    Place("Blue Hole", "St. Ann", 18.3833, -77.1167, PlaceType.LANDMARK),
    Place("Mystic Mountain", "St. Ann", 18.4167, -77.1167, PlaceType.LANDMARK),
    Place("Rick's Cafe", "Westmoreland", 18.2667, -78.3667, PlaceType.LANDMARK),
    Place("Seven Mile Beach", "Westmoreland", 18.2833, -78.3500, PlaceType.LANDMARK),
    Place("Doctor's Cave Beach", "St. James", 18.4833, -77.9167, PlaceType.LANDMARK),
    Place("Green Grotto Caves", "St. Ann", 18.4333, -77.3500, PlaceType.LANDMARK),
    Place("Rose Hall Great House", "St. James", 18.5000, -77.8500, PlaceType.LANDMARK),
    Place("Frenchman's Cove", "Portland", 18.1833, -76.4333, PlaceType.LANDMARK),
    Place("Blue Lagoon", "Portland", 18.1833, -76.4167, PlaceType.LANDMARK),
    Place("Reach Falls", "Portland", 18.0167, -76.3000, PlaceType.LANDMARK),
    Place("Port Henderson", "St. Catherine", 17.9333, -76.8667, PlaceType.LANDMARK),
    Place("Fort Charles", "Kingston", 17.9367, -76.8417, PlaceType.LANDMARK),
)
