"""FuelMaster : suivi carburant et planification ITV / Fuel tracking and inspection scheduling."""
