"""Built-in country list seeded into new libraries."""

from __future__ import annotations

from hinged.enums import CatalogSystem

# Major philatelic nations with their catalog prefixes
COUNTRIES_WITH_PREFIXES: list[tuple[str, dict[CatalogSystem, str]]] = [
    ("United States", {CatalogSystem.SCOTT: "US", CatalogSystem.STANLEY_GIBBONS: "USA", CatalogSystem.MICHEL: "USA"}),
    ("United Kingdom", {CatalogSystem.SCOTT: "GB", CatalogSystem.STANLEY_GIBBONS: "GB", CatalogSystem.MICHEL: "GB"}),
    ("Germany", {CatalogSystem.SCOTT: "GER", CatalogSystem.STANLEY_GIBBONS: "G", CatalogSystem.MICHEL: "D"}),
    (
        "France",
        {
            CatalogSystem.SCOTT: "FR",
            CatalogSystem.STANLEY_GIBBONS: "F",
            CatalogSystem.MICHEL: "F",
            CatalogSystem.YVERT_TELLIER: "F",
        },
    ),
    ("Japan", {CatalogSystem.SCOTT: "JPN", CatalogSystem.STANLEY_GIBBONS: "J", CatalogSystem.SAKURA: "J"}),
    ("Canada", {CatalogSystem.SCOTT: "CAN", CatalogSystem.STANLEY_GIBBONS: "C"}),
    ("Australia", {CatalogSystem.SCOTT: "AUS", CatalogSystem.STANLEY_GIBBONS: "A"}),
    ("China", {CatalogSystem.SCOTT: "PRC", CatalogSystem.STANLEY_GIBBONS: "C"}),
    ("Sweden", {CatalogSystem.SCOTT: "SWE", CatalogSystem.FACIT: "S"}),
    ("Italy", {CatalogSystem.SCOTT: "IT", CatalogSystem.STANLEY_GIBBONS: "I"}),
    ("Spain", {CatalogSystem.SCOTT: "SP", CatalogSystem.STANLEY_GIBBONS: "S"}),
    ("Netherlands", {CatalogSystem.SCOTT: "NETH", CatalogSystem.STANLEY_GIBBONS: "N"}),
    ("Belgium", {CatalogSystem.SCOTT: "BEL", CatalogSystem.STANLEY_GIBBONS: "B"}),
    ("Switzerland", {CatalogSystem.SCOTT: "SWI", CatalogSystem.STANLEY_GIBBONS: "SW"}),
    ("Austria", {CatalogSystem.SCOTT: "AUS", CatalogSystem.STANLEY_GIBBONS: "AU"}),
    ("Russia", {CatalogSystem.SCOTT: "RUS", CatalogSystem.STANLEY_GIBBONS: "R"}),
    ("India", {CatalogSystem.SCOTT: "IND", CatalogSystem.STANLEY_GIBBONS: "I"}),
    ("Brazil", {CatalogSystem.SCOTT: "BRA", CatalogSystem.STANLEY_GIBBONS: "BR"}),
    ("New Zealand", {CatalogSystem.SCOTT: "NZ", CatalogSystem.STANLEY_GIBBONS: "NZ"}),
    ("South Africa", {CatalogSystem.SCOTT: "SA", CatalogSystem.STANLEY_GIBBONS: "SA"}),
]

# All other current countries, no catalog prefixes
OTHER_COUNTRIES: list[str] = [
    "Afghanistan", "Albania", "Algeria", "Andorra", "Angola",
    "Antigua and Barbuda", "Argentina", "Armenia", "Azerbaijan",
    "Bahamas", "Bahrain", "Bangladesh", "Barbados", "Belarus",
    "Belize", "Benin", "Bhutan", "Bolivia", "Bosnia and Herzegovina",
    "Botswana", "Brunei", "Bulgaria", "Burkina Faso", "Burundi",
    "Cabo Verde", "Cambodia", "Cameroon", "Central African Republic", "Chad",
    "Chile", "Colombia", "Comoros", "Congo (Democratic Republic)", "Congo (Republic)",
    "Costa Rica", "Croatia", "Cuba", "Cyprus", "Czech Republic",
    "Denmark", "Djibouti", "Dominica", "Dominican Republic",
    "Ecuador", "Egypt", "El Salvador", "Equatorial Guinea", "Eritrea",
    "Estonia", "Eswatini", "Ethiopia",
    "Fiji", "Finland",
    "Gabon", "Gambia", "Georgia", "Ghana", "Greece",
    "Grenada", "Guatemala", "Guinea", "Guinea-Bissau", "Guyana",
    "Haiti", "Honduras", "Hungary",
    "Iceland", "Indonesia", "Iran", "Iraq", "Ireland", "Israel", "Ivory Coast",
    "Jamaica", "Jordan",
    "Kazakhstan", "Kenya", "Kiribati", "Kosovo", "Kuwait", "Kyrgyzstan",
    "Laos", "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya",
    "Liechtenstein", "Lithuania", "Luxembourg",
    "Madagascar", "Malawi", "Malaysia", "Maldives", "Mali", "Malta",
    "Marshall Islands", "Mauritania", "Mauritius", "Mexico", "Micronesia",
    "Moldova", "Monaco", "Mongolia", "Montenegro", "Morocco", "Mozambique", "Myanmar",
    "Namibia", "Nauru", "Nepal", "Nicaragua", "Niger", "Nigeria",
    "North Korea", "North Macedonia", "Norway",
    "Oman",
    "Pakistan", "Palau", "Palestine", "Panama", "Papua New Guinea", "Paraguay", "Peru",
    "Philippines", "Poland", "Portugal",
    "Qatar",
    "Romania", "Rwanda",
    "Saint Kitts and Nevis", "Saint Lucia", "Saint Vincent and the Grenadines",
    "Samoa", "San Marino", "Sao Tome and Principe", "Saudi Arabia", "Senegal",
    "Serbia", "Seychelles", "Sierra Leone", "Singapore", "Slovakia", "Slovenia",
    "Solomon Islands", "Somalia", "South Korea", "South Sudan", "Sri Lanka", "Sudan",
    "Suriname", "Syria",
    "Taiwan", "Tajikistan", "Tanzania", "Thailand", "Timor-Leste", "Togo",
    "Tonga", "Trinidad and Tobago", "Tunisia", "Turkey", "Turkmenistan", "Tuvalu",
    "Uganda", "Ukraine", "United Arab Emirates", "Uruguay", "Uzbekistan",
    "Vanuatu", "Vatican City", "Venezuela", "Vietnam",
    "Yemen",
    "Zambia", "Zimbabwe",
]  # fmt: skip
