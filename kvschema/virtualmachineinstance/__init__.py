"""Virtual machine instance parts: domain, networks, volumes, probes, spec and template."""