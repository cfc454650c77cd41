"""Virtual machine resources: spec, status, conditions and state change requests."""