"""
Example sweeping the launch energy over one random sensor field.
"""

from pdvsim import FlightAnalyzer, FlightSimulator, PDV, PdvParameters, SensorCatalog


def main():
    print("=" * 80)
    print("PDV Flight Simulator - Launch Energy Sweep")
    print("=" * 80)

    params = PdvParameters(min_requests=10)
    catalog = SensorCatalog.generate_random(40, area_size=1500.0, request_ratio=0.75, seed=42)
    snapshot = catalog.snapshot()
    print(f"Created field with {len(catalog)} nodes, {catalog.requesting_count()} requesting")

    analyzer = FlightAnalyzer()
    for energy in (40.0, 80.0, 120.0, 160.0, params.full_energy):
        catalog.restore(snapshot)
        pdv = PDV(params, initial_energy=energy)
        result = FlightSimulator(pdv).flight_simulation(catalog, catalog.requesting_path())
        analyzer.add_result(result, label=f"{energy:.0f} Wh")

    print()
    analyzer.print_summary()

    stats = analyzer.get_statistics()
    print(f"\nCompletion: min {stats['completion_ratio']['min']:.2f}%"
          f", max {stats['completion_ratio']['max']:.2f}%")

    output_file = "energy_sweep.json"
    analyzer.export_to_json(output_file)
    print(f"Results exported to {output_file}")


if __name__ == "__main__":
    main()
